import os
import logging

from oom_watch.errors import SourceUnavailable

DEFAULT_KMSG_PATH = '/dev/kmsg'
# /dev/kmsg 每次 read 返回一条完整记录，缓冲区必须足够容纳单条记录
KMSG_BUFFER_SIZE = 8192

log = logging.getLogger(__name__)


def open_kmsg(path=DEFAULT_KMSG_PATH):
    """打开内核消息设备（或任意日志文件），返回二进制流

    路径不存在时抛出 SourceUnavailable，其它打开失败原样抛出 OSError。
    """
    if not os.path.exists(path):
        raise SourceUnavailable(path)
    try:
        return open(path, 'rb', buffering=KMSG_BUFFER_SIZE)
    except FileNotFoundError as e:
        raise SourceUnavailable(path) from e


def iter_lines(stream, logger=None):
    """逐行读取数据流，去掉行尾换行符

    每次拉取都会阻塞，直到有新行、流结束或发生 I/O 错误；后两种情况下序列结束。
    """
    logger = logger or log
    while True:
        try:
            raw = stream.readline()
        except OSError as e:
            logger.warning("读取内核消息失败: %s", e)
            return
        if not raw:
            return
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8', errors='replace')
        yield raw.rstrip('\r\n')
