import sys
import json


class ResultManager:
    def __init__(self, as_json=False, out=None):
        self.as_json = as_json
        self.out = out or sys.stdout
        self.count = 0

    def add_result(self, instance, event=None):
        """输出一个 OOM 事件"""
        self.count += 1
        if self.as_json:
            print(json.dumps(event or instance.to_event()), file=self.out, flush=True)
            return
        print(f"🚨 [OOM] {instance.describe()}", file=self.out, flush=True)

    def summary(self):
        return f"📊 共检测到 {self.count} 个 OOM 事件"
