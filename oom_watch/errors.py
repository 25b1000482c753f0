class OomWatchError(Exception):
    """oom_watch 所有异常的基类"""


class SourceUnavailable(OomWatchError, FileNotFoundError):
    """内核消息设备不存在，无法解析 OOM 事件"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"'{path}' does not exist; unable to parse for OOM events")


class MalformedTerminalLine(OomWatchError, ValueError):
    """结束行结构匹配成功，但时间戳或 pid 无法解析"""

    def __init__(self, line, reason):
        self.line = line
        self.reason = reason
        super().__init__(f"{reason}: {line!r}")
