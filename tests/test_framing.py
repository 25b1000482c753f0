import logging

from oom_watch.detective.framing import split_envelope, strip_envelope


def test_strip_envelope_returns_message_after_first_delimiter():
    assert strip_envelope("6,123,456,-;invoked oom-killer: a;b") == "invoked oom-killer: a;b"


def test_continuation_line_is_never_split(caplog):
    line = " SUBSYSTEM=memory;DEVICE=+cgroup:x"
    with caplog.at_level(logging.WARNING):
        assert strip_envelope(line) == line
    assert split_envelope(line) == (None, line)
    assert caplog.records == []


def test_missing_delimiter_warns_and_keeps_whole_line(caplog):
    line = "Jun 13 12:34:56 host kernel: invoked oom-killer: order=0"
    with caplog.at_level(logging.WARNING):
        assert strip_envelope(line) == line
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING
    assert "expected a ';'" in caplog.records[0].getMessage()


def test_injected_logger_receives_diagnostics(caplog):
    logger = logging.getLogger('tests.framing')
    with caplog.at_level(logging.WARNING, logger='tests.framing'):
        strip_envelope("no delimiter here", logger)
    assert [r.name for r in caplog.records] == ['tests.framing']


def test_split_envelope_without_delimiter():
    assert split_envelope("plain text") == (None, "plain text")
    assert split_envelope("6,1,2,-;") == ("6,1,2,-", "")
