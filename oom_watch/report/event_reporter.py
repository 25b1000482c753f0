import socket
import logging

import requests

log = logging.getLogger(__name__)

INGEST_PATH = '/api/v1/ingest'


class EventReporter:
    def __init__(self, server_url, token=None, timeout=10, host_id=None):
        """
        初始化上报器

        :param server_url: 中心服务器地址，如 'http://192.168.1.100:8000'
        :param token: 可选的认证 token
        :param timeout: 请求超时（秒）
        :param host_id: 主机标识，默认使用主机名
        """
        self.server_url = server_url.rstrip('/')
        self.ingest_url = f"{self.server_url}{INGEST_PATH}"
        self.token = token
        self.timeout = timeout
        self.host_id = host_id or socket.gethostname()

    @classmethod
    def from_config(cls, report_config):
        return cls(
            server_url=report_config['server'],
            token=report_config.get('token'),
            timeout=report_config.get('timeout_sec', 10),
        )

    def report(self, instance):
        """上报单个 OOM 事件"""
        return self.report_events([instance.to_event(self.host_id)])

    def report_events(self, events):
        """上报事件到中心服务器，返回服务器确认处理的事件数"""
        headers = {
            'Content-Type': 'application/json',
        }
        if self.token:
            headers['X-Ingest-Token'] = self.token

        try:
            response = requests.post(
                self.ingest_url,
                json={"events": events},
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            log.error("网络错误: %s", e)
            return 0

        if response.status_code != 200:
            log.error("上报失败: HTTP %s - %s", response.status_code, response.text)
            return 0
        try:
            result = response.json()
        except ValueError:
            log.error("上报响应不是合法 JSON: %s", response.text)
            return 0
        log.info("上报成功: %s/%s 个事件", result.get('processed', 0), result.get('received', 0))
        return result.get('processed', 0)
