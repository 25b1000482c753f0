import os
import copy
import logging

import yaml

from oom_watch.log.kmsg_scanner import DEFAULT_KMSG_PATH

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

log = logging.getLogger(__name__)


class ConfigManager:
    def __init__(self, config_path=None):
        self.config_path = config_path
        self.default_config = self.get_default_config()
        self.config = self.load_config()

    def get_default_config(self):
        """获取默认配置"""
        return {
            'kmsg_path': DEFAULT_KMSG_PATH,
            'log_level': 'INFO',
            'queue_size': 1,
            'report': {
                'enabled': False,
                'server': 'http://127.0.0.1:8000',
                'token': None,
                'timeout_sec': 10,
            },
        }

    def load_config(self):
        """加载配置文件"""
        if not self.config_path:
            return copy.deepcopy(self.default_config)
        if not os.path.exists(self.config_path):
            log.warning("配置文件 %s 不存在，使用默认配置", self.config_path)
            return copy.deepcopy(self.default_config)

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f) or {}
            if not isinstance(user_config, dict):
                raise ValueError(f"顶层必须是映射，实际为 {type(user_config).__name__}")
        except (OSError, yaml.YAMLError, ValueError) as e:
            log.error("无法加载配置文件 %s: %s", self.config_path, e)
            return copy.deepcopy(self.default_config)

        # 深度合并配置
        config = copy.deepcopy(self.default_config)
        for key, value in user_config.items():
            if key in config and isinstance(config[key], dict) and isinstance(value, dict):
                config[key].update(value)
            else:
                config[key] = value
        return config

    def get_kmsg_path(self):
        return self.config.get('kmsg_path') or DEFAULT_KMSG_PATH

    def override(self, log_level=None, server=None, token=None):
        """用命令行参数覆盖配置文件"""
        if log_level:
            self.config['log_level'] = log_level
        report = self.get_report_config()
        if server:
            report.update({'enabled': True, 'server': server})
        if token:
            report['token'] = token
        self.config['report'] = report

    def get_log_level(self):
        level = str(self.config.get('log_level') or 'INFO').upper()
        if level not in LOG_LEVELS:
            log.warning("未知日志级别 %s，使用 INFO", level)
            return 'INFO'
        return level

    def get_queue_size(self):
        """事件队列容量，至少为 1，保证最多只有一个事件在途"""
        try:
            return max(1, int(self.config.get('queue_size', 1)))
        except (TypeError, ValueError):
            return 1

    def get_report_config(self):
        """获取上报配置"""
        report = self.config.get('report')
        return dict(report) if isinstance(report, dict) else {}

    def is_report_enabled(self):
        report = self.get_report_config()
        return bool(report.get('enabled')) and bool(report.get('server'))
