import re

from oom_watch.models import OomInstance, ROOT_CONTAINER

FIRST_LINE_RE = re.compile(r'invoked oom-killer:')


def check_if_start_of_oom_messages(message):
    """判断消息是否为内核 OOM 日志的第一行"""
    return FIRST_LINE_RE.search(message) is not None


class OOMDetector:
    def __init__(self):
        self.name = "oom"

    def detect(self, message):
        """检测到起始标记时返回新的 OomInstance，否则返回 None

        message 是已经去掉 syslog 前缀的文本。
        """
        if check_if_start_of_oom_messages(message):
            return OomInstance(container_name=ROOT_CONTAINER)
        return None
