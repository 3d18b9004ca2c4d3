import csv
import logging
import math
import os
import time
from typing import List, NamedTuple, Sequence

logger = logging.getLogger(__name__)

SUMMARY_FILENAME = "benchmark_summary.csv"


class InsufficientDataError(ValueError):
    pass


class RunMetrics(NamedTuple):
    avg_latency_ms: float
    p95_latency_ms: float
    requests_per_second: float
    total_time_ms: float


def calculate_metrics(latencies_ms: Sequence[float], total_requests: int,
                      total_time_ms: float) -> RunMetrics:
    """Summarise one strategy run.

    Latency figures cover successful requests only, while throughput divides
    every issued request (failures included) by the wall-clock span. The
    input sequence is left untouched.
    """
    if not latencies_ms:
        raise InsufficientDataError("no successful requests to compute latency from")

    sorted_latencies = sorted(latencies_ms)
    count = len(sorted_latencies)
    avg_latency = sum(sorted_latencies) / count
    # Nearest-rank, zero-indexed
    idx = min(math.floor(count * 0.95), count - 1)
    p95_latency = sorted_latencies[idx]

    total_time_s = total_time_ms / 1000.0
    requests_per_second = total_requests / total_time_s if total_time_s > 0 else math.inf

    return RunMetrics(avg_latency, p95_latency, requests_per_second, total_time_ms)


def format_report(name: str, metrics: RunMetrics) -> List[str]:
    return [
        f"{name}:",
        f"Average Latency: {metrics.avg_latency_ms:.2f}ms",
        f"P95 Latency: {metrics.p95_latency_ms:.2f}ms",
        f"Requests/second: {metrics.requests_per_second:.2f}",
        f"Total Time: {metrics.total_time_ms:.2f}ms",
    ]


SUMMARY_FIELDS = ["timestamp", "strategy", "target_url", "total_requests", "concurrency",
                  "pool_capacity", "successful_requests", "failed_requests",
                  "avg_latency_ms", "p95_latency_ms", "requests_per_second", "total_time_ms"]


def save_summary(results_dir: str, run, config) -> str:
    """Append one row for a finished strategy run to the summary CSV."""
    if not os.path.exists(results_dir):
        os.makedirs(results_dir)

    summary_filename = os.path.join(results_dir, SUMMARY_FILENAME)
    m = run.metrics
    summary_data = {
        "timestamp": time.strftime('%Y-%m-%d %H:%M:%S'), "strategy": run.strategy.value,
        "target_url": config.target_url, "total_requests": config.total_requests,
        "concurrency": config.concurrency, "pool_capacity": config.pool_capacity,
        "successful_requests": len(run.latencies_ms), "failed_requests": run.failed_requests,
        "avg_latency_ms": round(m.avg_latency_ms, 2) if m else "",
        "p95_latency_ms": round(m.p95_latency_ms, 2) if m else "",
        "requests_per_second": round(m.requests_per_second, 2) if m else "",
        "total_time_ms": round(run.total_time_ms, 2),
    }
    file_exists = os.path.isfile(summary_filename)
    with open(summary_filename, 'a', newline='') as f:
        csv_writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        if not file_exists: csv_writer.writeheader()
        csv_writer.writerow(summary_data)
    logger.info(f"Benchmark summary appended to {summary_filename}")
    return summary_filename
