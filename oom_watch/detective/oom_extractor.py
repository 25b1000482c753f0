import re
import logging
import posixpath
from datetime import datetime

from oom_watch.errors import MalformedTerminalLine
from oom_watch.detective.framing import split_envelope

CONTAINER_RE = re.compile(r'Task in (.*) killed as a result of limit of (.*)')
LAST_LINE_RE = re.compile(
    r'^([A-Z][a-z]{2} .*[0-9]{1,2} [0-9]{1,2}:[0-9]{2}:[0-9]{2}) '
    r'(?:.* )?Killed process (\S+) \((\w+)\)'
)
# 内核日志时间不带年份，补上当前年份后解析
TIME_FORMAT = '%b %d %H:%M:%S %Y'

log = logging.getLogger(__name__)


def absolute_container_name(name):
    """把容器名规范化为以 / 开头的绝对路径"""
    return posixpath.normpath('/' + name.strip().lstrip('/'))


def get_container_name(line, instance):
    """匹配 "Task in ... killed as a result of limit of ..." 行并写入容器名

    返回是否匹配。同一事件内多次匹配时以最后一次为准。
    """
    parsed = CONTAINER_RE.search(line)
    if parsed is None:
        return False
    instance.container_name = absolute_container_name(parsed.group(1))
    instance.victim_container_name = absolute_container_name(parsed.group(2))
    return True


def parse_time_of_death(stamp, now=None):
    year = (now or datetime.now)().year
    try:
        naive = datetime.strptime(f"{stamp} {year}", TIME_FORMAT)
    except ValueError as e:
        raise MalformedTerminalLine(stamp, f"invalid timestamp ({e})") from e
    return naive.astimezone()


def parse_pid(text):
    if not (text.isascii() and text.isdigit()):
        raise MalformedTerminalLine(text, "pid is not a base-10 integer")
    pid = int(text, 10)
    if pid <= 0:
        raise MalformedTerminalLine(text, "pid must be positive")
    return pid


def match_last_line(line):
    """结束行规则锚定在行首

    /dev/kmsg 的记录带有 syslog 前缀，原始行匹配失败时再用去掉前缀的消息尝试一次。
    """
    parsed = LAST_LINE_RE.match(line)
    if parsed is None:
        envelope, message = split_envelope(line)
        if envelope is not None:
            parsed = LAST_LINE_RE.match(message)
    return parsed


def get_process_name_pid(line, instance, now=None):
    """解析结束行中的时间、pid 和进程名

    不匹配返回 False；结构匹配但解析失败时抛出 MalformedTerminalLine，instance 保持不变。
    """
    parsed = match_last_line(line)
    if parsed is None:
        return False
    stamp, pid_text, process_name = parsed.groups()
    try:
        time_of_death = parse_time_of_death(stamp, now)
        pid = parse_pid(pid_text)
    except MalformedTerminalLine as e:
        e.line = line
        raise
    instance.time_of_death = time_of_death
    instance.pid = pid
    instance.process_name = process_name
    return True


class OomExtractor:
    """从起始标记之后的原始行中构建一个 OomInstance"""

    def __init__(self, instance, now=None, logger=None):
        self.instance = instance
        self.finished = False
        self._now = now
        self._log = logger or log

    def feed(self, line):
        """处理一行原始日志，事件完成时返回 True"""
        get_container_name(line, self.instance)
        try:
            self.finished = get_process_name_pid(line, self.instance, self._now)
        except MalformedTerminalLine as e:
            self._log.error("failed to parse OOM kill line %r: %s", e.line, e.reason)
            self.finished = False
        return self.finished
