import logging

ENVELOPE_DELIMITER = ';'
CONTINUATION_PREFIX = ' '

log = logging.getLogger(__name__)


def is_continuation(line):
    return line.startswith(CONTINUATION_PREFIX)


def split_envelope(line):
    """拆分 /dev/kmsg 记录，返回 (envelope, message)

    续行（以空格开头）原样返回，不尝试拆分；没有分隔符时 envelope 为 None。
    格式见 https://www.kernel.org/doc/Documentation/ABI/testing/dev-kmsg
    """
    if is_continuation(line):
        return None, line
    envelope, sep, message = line.partition(ENVELOPE_DELIMITER)
    if not sep:
        return None, line
    return envelope, message


def strip_envelope(line, logger=None):
    """去掉 syslog 前缀，返回用于检测 OOM 起始标记的消息文本"""
    if is_continuation(line):
        return line
    envelope, message = split_envelope(line)
    if envelope is None:
        (logger or log).warning("unrecognized kmsg line %r, expected a ';'", line)
    return message
