import logging

from oom_watch.detective.framing import strip_envelope
from oom_watch.detective.oom_detector import OOMDetector
from oom_watch.detective.oom_extractor import OomExtractor
from oom_watch.log.kmsg_scanner import DEFAULT_KMSG_PATH, iter_lines, open_kmsg

log = logging.getLogger(__name__)


class OomParser:
    """扫描内核消息流，解析出 OOM kill 事件

    单线程同步扫描：每次拉取一行，推进状态机。数据流结束（EOF 或 I/O 错误）后扫描永久结束，
    需要重新打开数据源并创建新的 OomParser 才能继续上报。
    """

    def __init__(self, stream, logger=None, now=None, source_name=''):
        self._in = stream
        self._log = logger or log
        self._now = now
        self._detector = OOMDetector()
        self.source_name = source_name or getattr(stream, 'name', '') or ''
        if not isinstance(self.source_name, str):
            self.source_name = ''

    @classmethod
    def from_path(cls, path=DEFAULT_KMSG_PATH, **kwargs):
        """打开 path 并创建解析器；打开失败时抛出 SourceUnavailable 或 OSError"""
        kwargs.setdefault('source_name', path)
        return cls(open_kmsg(path), **kwargs)

    def iter_ooms(self):
        """按结束行出现的顺序逐个产出已完成的 OomInstance"""
        lines = iter_lines(self._in, self._log)
        for line in lines:
            message = strip_envelope(line, self._log)
            current = self._detector.detect(message)
            if current is None:
                continue
            current.source_file = self.source_name
            extractor = OomExtractor(current, now=self._now, logger=self._log)
            for raw in lines:
                if extractor.feed(raw):
                    break
            if not extractor.finished:
                self._log.warning("kmsg stream ended inside an OOM report, dropping incomplete event")
                break
            yield current
        self._log.warning("OOMParser exited, OOM events will not be reported.")

    def stream_ooms(self, out_queue):
        """把事件依次放入调用方提供的队列，队列满时阻塞；返回时数据流已经结束"""
        for instance in self.iter_ooms():
            out_queue.put(instance)


def new(path=DEFAULT_KMSG_PATH, **kwargs):
    """基于 /dev/kmsg 创建 OomParser"""
    return OomParser.from_path(path, **kwargs)
