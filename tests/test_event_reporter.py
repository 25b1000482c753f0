import logging
from datetime import datetime

import requests

from oom_watch.models import OomInstance
from oom_watch.report import event_reporter
from oom_watch.report.event_reporter import EventReporter


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def make_instance():
    return OomInstance(
        pid=4821,
        process_name='worker',
        time_of_death=datetime(2024, 6, 13, 12, 34, 56).astimezone(),
        container_name='/kubepods/podA',
        victim_container_name='/kubepods/podA/containerX',
    )


def test_report_posts_event_with_token(monkeypatch):
    calls = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append((url, json, headers, timeout))
        return FakeResponse(payload={'processed': 1, 'received': 1})

    monkeypatch.setattr(event_reporter.requests, 'post', fake_post)
    reporter = EventReporter('http://server:8000/', token='secret', timeout=3, host_id='node-1')
    assert reporter.report(make_instance()) == 1

    [(url, payload, headers, timeout)] = calls
    assert url == 'http://server:8000/api/v1/ingest'
    assert headers['X-Ingest-Token'] == 'secret'
    assert timeout == 3
    [event] = payload['events']
    assert event['type'] == 'oom'
    assert event['host_id'] == 'node-1'
    assert event['pid'] == 4821
    assert event['container_name'] == '/kubepods/podA'
    assert event['victim_container_name'] == '/kubepods/podA/containerX'


def test_report_without_token_omits_header(monkeypatch):
    seen = {}

    def fake_post(url, json=None, headers=None, timeout=None):
        seen.update(headers)
        return FakeResponse(payload={'processed': 1})

    monkeypatch.setattr(event_reporter.requests, 'post', fake_post)
    EventReporter('http://server:8000', host_id='n').report(make_instance())
    assert 'X-Ingest-Token' not in seen


def test_network_error_is_logged_not_raised(monkeypatch, caplog):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(event_reporter.requests, 'post', fake_post)
    with caplog.at_level(logging.ERROR):
        assert EventReporter('http://server:8000', host_id='n').report(make_instance()) == 0
    assert 'refused' in caplog.text


def test_http_error_status_returns_zero(monkeypatch, caplog):
    monkeypatch.setattr(
        event_reporter.requests, 'post',
        lambda *a, **kw: FakeResponse(status_code=401, text='unauthorized'))
    with caplog.at_level(logging.ERROR):
        assert EventReporter('http://server:8000', host_id='n').report(make_instance()) == 0
    assert '401' in caplog.text


def test_from_config():
    reporter = EventReporter.from_config({'server': 'http://a:1', 'token': None, 'timeout_sec': 5})
    assert reporter.ingest_url == 'http://a:1/api/v1/ingest'
    assert reporter.timeout == 5
