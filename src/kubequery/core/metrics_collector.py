"""
kubequery 指标收集器

记录每张表的generate调用统计，包括：
- 调用次数、错误次数、返回行数
- 响应时间（平均/最大/最小）
- 进程资源使用情况
指标只在分发层记录，不参与行投影。
"""

import threading
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict

import psutil
from loguru import logger


@dataclass
class PerformanceStats:
    """单张表的性能统计"""
    avg_response_time: float = 0.0
    max_response_time: float = 0.0
    min_response_time: float = float('inf')
    total_requests: int = 0
    error_count: int = 0
    total_rows: int = 0

    def update(self, response_time: float, rows: int = 0, is_error: bool = False):
        """更新统计信息"""
        self.total_requests += 1
        self.total_rows += rows
        if is_error:
            self.error_count += 1

        if response_time > self.max_response_time:
            self.max_response_time = response_time
        if response_time < self.min_response_time:
            self.min_response_time = response_time

        # 累计平均
        self.avg_response_time += (response_time - self.avg_response_time) / self.total_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 100.0
        return (self.total_requests - self.error_count) / self.total_requests * 100

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "avg_response_time": self.avg_response_time,
            "max_response_time": self.max_response_time,
            "min_response_time": self.min_response_time if self.min_response_time != float('inf') else 0.0,
            "total_requests": self.total_requests,
            "error_count": self.error_count,
            "total_rows": self.total_rows,
            "success_rate": self.success_rate,
        }


class MetricsCollector:
    """指标收集器（线程安全，generate在线程池中执行）"""

    def __init__(self):
        self.table_stats: Dict[str, PerformanceStats] = defaultdict(PerformanceStats)
        self.counters: Dict[str, int] = defaultdict(int)
        self.started_at = time.time()
        self.lock = threading.RLock()

        logger.debug("指标收集器初始化完成")

    def record_generate(self, table_name: str, response_time: float, rows: int = 0, is_error: bool = False):
        """记录一次generate调用"""
        with self.lock:
            self.table_stats[table_name].update(response_time, rows, is_error)
            self.counters["generate.total"] += 1
            if is_error:
                self.counters["generate.errors"] += 1
            else:
                self.counters["generate.rows"] += rows

    def get_process_metrics(self) -> Dict[str, Any]:
        """获取进程资源使用"""
        try:
            process = psutil.Process()
            memory = process.memory_info()
            return {
                "memory_rss_bytes": memory.rss,
                "cpu_percent": process.cpu_percent(interval=None),
                "threads": process.num_threads(),
            }
        except psutil.Error as e:
            logger.warning(f"收集进程指标失败: {e}")
            return {}

    def get_summary_stats(self) -> Dict[str, Any]:
        """获取统计摘要"""
        with self.lock:
            tables = {name: stats.to_dict() for name, stats in self.table_stats.items()}
            counters = dict(self.counters)
        return {
            "uptime_seconds": time.time() - self.started_at,
            "counters": counters,
            "tables": tables,
            "process": self.get_process_metrics(),
        }

    def export_prometheus_format(self) -> str:
        """导出Prometheus文本格式"""
        lines = [
            "# TYPE kubequery_generate_requests_total counter",
            "# TYPE kubequery_generate_errors_total counter",
            "# TYPE kubequery_generate_rows_total counter",
            "# TYPE kubequery_generate_duration_seconds_avg gauge",
        ]
        with self.lock:
            for table_name, stats in sorted(self.table_stats.items()):
                label = f'{{table="{table_name}"}}'
                lines.append(f"kubequery_generate_requests_total{label} {stats.total_requests}")
                lines.append(f"kubequery_generate_errors_total{label} {stats.error_count}")
                lines.append(f"kubequery_generate_rows_total{label} {stats.total_rows}")
                lines.append(f"kubequery_generate_duration_seconds_avg{label} {stats.avg_response_time:.6f}")

        process = self.get_process_metrics()
        if "memory_rss_bytes" in process:
            lines.append("# TYPE kubequery_process_memory_rss_bytes gauge")
            lines.append(f"kubequery_process_memory_rss_bytes {process['memory_rss_bytes']}")
        return "\n".join(lines) + "\n"

    def get_health_status(self) -> Dict[str, Any]:
        """获取健康状态"""
        with self.lock:
            total = self.counters.get("generate.total", 0)
            errors = self.counters.get("generate.errors", 0)
        error_rate = (errors / total * 100) if total else 0.0
        return {
            "status": "healthy" if error_rate < 50 else "degraded",
            "generate_calls": total,
            "error_rate": error_rate,
        }
