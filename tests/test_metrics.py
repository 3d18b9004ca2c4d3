import csv
import math
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from config import BenchmarkConfig
from http_clients import ClientStrategy
from metrics import (InsufficientDataError, RunMetrics, calculate_metrics,
                     format_report, save_summary, SUMMARY_FILENAME)
from benchmark_driver import StrategyRun


class TestCalculateMetrics:
    def test_ten_samples(self):
        latencies = [10.0 * i for i in range(1, 11)]
        m = calculate_metrics(latencies, total_requests=10, total_time_ms=2000.0)
        assert m.avg_latency_ms == pytest.approx(55.0)
        assert m.p95_latency_ms == pytest.approx(100.0)  # sorted[floor(9.5)] == sorted[9]
        assert m.requests_per_second == pytest.approx(5.0)
        assert m.total_time_ms == 2000.0

    def test_p95_nearest_rank_zero_indexed(self):
        latencies = list(range(1, 101))  # 1..100
        m = calculate_metrics(latencies, total_requests=100, total_time_ms=1000.0)
        assert m.p95_latency_ms == 96  # sorted[95]

    def test_single_sample(self):
        m = calculate_metrics([42.5], total_requests=1, total_time_ms=50.0)
        assert m.avg_latency_ms == 42.5
        assert m.p95_latency_ms == 42.5

    def test_input_is_not_mutated(self):
        latencies = [30.0, 10.0, 20.0]
        calculate_metrics(latencies, total_requests=3, total_time_ms=100.0)
        assert latencies == [30.0, 10.0, 20.0]

    def test_throughput_counts_failed_requests(self):
        # 2 successes out of 8 issued: rps still uses all 8
        m = calculate_metrics([5.0, 15.0], total_requests=8, total_time_ms=4000.0)
        assert m.requests_per_second == pytest.approx(2.0)
        assert m.avg_latency_ms == pytest.approx(10.0)

    def test_empty_raises_insufficient_data(self):
        with pytest.raises(InsufficientDataError):
            calculate_metrics([], total_requests=5, total_time_ms=100.0)

    def test_zero_elapsed_time_is_infinite_rate(self):
        m = calculate_metrics([1.0], total_requests=1, total_time_ms=0.0)
        assert math.isinf(m.requests_per_second)


def test_format_report_two_decimals():
    lines = format_report("Pooled", RunMetrics(55.0, 100.0, 1234.5678, 8100.123))
    assert lines == [
        "Pooled:",
        "Average Latency: 55.00ms",
        "P95 Latency: 100.00ms",
        "Requests/second: 1234.57",
        "Total Time: 8100.12ms",
    ]


def test_save_summary_appends_rows(tmp_path):
    config = BenchmarkConfig(target_url="http://localhost/", total_requests=4, concurrency=2)
    ok_run = StrategyRun(ClientStrategy.POOLED, [2, 2], [10.0, 20.0, 30.0], 1, 100.0,
                         RunMetrics(20.0, 30.0, 40.0, 100.0))
    empty_run = StrategyRun(ClientStrategy.DEFAULT, [2, 2], [], 4, 80.0, None)

    results_dir = str(tmp_path / "results")
    path = save_summary(results_dir, ok_run, config)
    save_summary(results_dir, empty_run, config)

    assert path == os.path.join(results_dir, SUMMARY_FILENAME)
    with open(path, newline='') as f:
        rows = list(csv.DictReader(f))
    assert [r["strategy"] for r in rows] == ["pooled", "default"]
    assert rows[0]["successful_requests"] == "3"
    assert rows[0]["p95_latency_ms"] == "30.0"
    assert rows[1]["failed_requests"] == "4"
    assert rows[1]["avg_latency_ms"] == ""
