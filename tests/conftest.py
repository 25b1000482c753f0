import io
from datetime import datetime

import pytest

from oom_watch.detective.oom_parser import OomParser


EXAMPLE_BLOCK = [
    "6,123,456,-;invoked oom-killer: gfp_mask=0x201da, order=0",
    "6,124,456,-;Task in /kubepods/podA killed as a result of limit of /kubepods/podA/containerX",
    "6,125,456,-;Jun 13 12:34:56 Killed process 4821 (worker)",
]


def to_stream(lines):
    return io.BytesIO(''.join(line + '\n' for line in lines).encode('utf-8'))


@pytest.fixture
def example_block():
    return list(EXAMPLE_BLOCK)


@pytest.fixture
def fixed_now():
    return lambda: datetime(2024, 3, 1, 8, 0, 0)


@pytest.fixture
def parse_lines(fixed_now):
    """把若干行 kmsg 文本解析为事件列表"""
    def parse(lines, **kwargs):
        kwargs.setdefault('now', fixed_now)
        parser = OomParser(to_stream(lines), **kwargs)
        return list(parser.iter_ooms())
    return parse


@pytest.fixture
def kmsg_file(tmp_path, example_block):
    path = tmp_path / 'kmsg.log'
    path.write_text(''.join(line + '\n' for line in example_block), encoding='utf-8')
    return path


@pytest.fixture
def stream_of():
    return to_stream
