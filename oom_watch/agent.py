"""
OOM 事件采集 Agent

在被检测节点上运行，它会：
1. 持续读取 /dev/kmsg
2. 解析内核 OOM killer 日志，输出结构化事件
3. 可选：通过网络上报到中心服务器

使用方法：
    oom-watch --server http://your-server:8000 --token your-token
"""

import sys
import queue
import logging
import argparse
import threading

from oom_watch.anomaly_config.config_master import ConfigManager
from oom_watch.detective.oom_parser import OomParser
from oom_watch.errors import SourceUnavailable
from oom_watch.report.event_reporter import EventReporter
from oom_watch.result_manager import ResultManager

log = logging.getLogger(__name__)


class Agent:
    def __init__(self, config_manager, source=None, as_json=False):
        self.config_manager = config_manager
        self.source = source or config_manager.get_kmsg_path()
        self.result_manager = ResultManager(as_json=as_json)
        self.reporter = None
        if config_manager.is_report_enabled():
            self.reporter = EventReporter.from_config(config_manager.get_report_config())

    def start_parser(self, parser, events):
        """在后台线程中运行解析器，数据流结束后放入 None 通知消费者"""
        def run():
            try:
                parser.stream_ooms(events)
            finally:
                events.put(None)

        thread = threading.Thread(target=run, name='oom-parser', daemon=True)
        thread.start()
        return thread

    def handle(self, instance):
        """处理一个完成的 OOM 事件"""
        event = instance.to_event(self.reporter.host_id if self.reporter else None)
        self.result_manager.add_result(instance, event)
        if self.reporter:
            self.reporter.report_events([event])

    def run(self):
        """运行 Agent 主循环，返回进程退出码"""
        try:
            parser = OomParser.from_path(self.source)
        except SourceUnavailable as e:
            print(f"❌ {e}", file=sys.stderr)
            return 2
        except OSError as e:
            print(f"❌ 无法打开 {self.source}: {e}", file=sys.stderr)
            print("💡 读取 /dev/kmsg 通常需要 root 权限，尝试使用 sudo 运行", file=sys.stderr)
            return 2

        print(f"🔍 正在监听 {self.source} 中的 OOM 事件...", file=sys.stderr)
        if self.reporter:
            print(f"   上报服务器: {self.reporter.server_url}", file=sys.stderr)

        events = queue.Queue(maxsize=self.config_manager.get_queue_size())
        self.start_parser(parser, events)
        try:
            while True:
                instance = events.get()
                if instance is None:
                    break
                self.handle(instance)
        except KeyboardInterrupt:
            print("\n收到中断信号，正在退出...", file=sys.stderr)
        print(self.result_manager.summary(), file=sys.stderr)
        return 0


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog='oom-watch',
        description='从内核消息中解析 OOM killer 事件',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  # 监听 /dev/kmsg
  sudo oom-watch

  # 解析保存下来的 kmsg 日志
  oom-watch --source ./kmsg.log --json

  # 上报到中心服务器
  sudo oom-watch --server http://192.168.1.100:8000 --token my-secret-token
        """
    )
    parser.add_argument('--config', help='YAML 配置文件路径')
    parser.add_argument('--source', help='内核消息来源（默认 /dev/kmsg）')
    parser.add_argument('--server', help='中心服务器地址，指定后启用上报')
    parser.add_argument('--token', help='可选的认证 token')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='日志级别（默认读取配置文件，INFO）'
    )
    parser.add_argument('--json', action='store_true', help='每个事件输出一行 JSON')
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    config_manager = ConfigManager(args.config)
    config_manager.override(log_level=args.log_level, server=args.server, token=args.token)

    logging.basicConfig(
        level=config_manager.get_log_level(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    agent = Agent(config_manager, source=args.source, as_json=args.json)
    return agent.run()


if __name__ == '__main__':
    sys.exit(main())
