import hashlib
import socket
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

SCHEMA_VERSION = "1.0"
ROOT_CONTAINER = "/"


@dataclass
class OomInstance:
    """一次 OOM kill 事件

    time_of_death 只精确到内核日志给出的时间，年份取解析时的当前年份。
    container_name 是触发 OOM 的容器，victim_container_name 是被杀进程所在的容器。
    """
    pid: int = 0
    process_name: str = ''
    time_of_death: Optional[datetime] = None
    container_name: str = ROOT_CONTAINER
    victim_container_name: str = ''
    source_file: str = field(default='', compare=False)

    def describe(self):
        """单行可读描述"""
        when = self.time_of_death.strftime('%Y-%m-%d %H:%M:%S') if self.time_of_death else '?'
        victim = self.victim_container_name or '-'
        return (f"Killed process {self.pid} ({self.process_name}) at {when}, "
                f"container={self.container_name} victim={victim}")

    def to_event(self, host_id=None):
        """转换为 ingest 接口使用的事件格式"""
        host_id = host_id or socket.gethostname()
        tod = self.time_of_death.isoformat() if self.time_of_death else None
        raw = f"{host_id}|{self.pid}|{self.process_name}|{tod}".encode('utf-8', 'ignore')
        return {
            "schema_version": SCHEMA_VERSION,
            "id": hashlib.sha256(raw).hexdigest()[:16],
            "type": "oom",
            "severity": "major",
            "message": self.describe(),
            "detected_at": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime()),
            "host_id": host_id,
            "source_file": self.source_file,
            "pid": self.pid,
            "process_name": self.process_name,
            "time_of_death": tod,
            "container_name": self.container_name,
            "victim_container_name": self.victim_container_name,
        }
