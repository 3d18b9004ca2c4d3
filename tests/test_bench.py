import logging
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import bench
from config import BenchmarkConfig


def test_bad_config_exits_without_metrics(monkeypatch, caplog):
    called = []

    async def fake_run_benchmark(config):
        called.append(config)

    monkeypatch.setattr(bench, "run_benchmark", fake_run_benchmark)

    with caplog.at_level(logging.INFO):
        code = bench.main(BenchmarkConfig(target_url="not a url"))

    assert code == 1
    assert called == []
    assert "Invalid configuration" in caplog.text
    assert "Average Latency" not in caplog.text


def test_valid_config_runs_benchmark(monkeypatch):
    called = []

    async def fake_run_benchmark(config):
        called.append(config)
        return []

    monkeypatch.setattr(bench, "run_benchmark", fake_run_benchmark)
    config = BenchmarkConfig(target_url="http://127.0.0.1:8080/", total_requests=2, concurrency=1)

    assert bench.main(config) == 0
    assert called == [config]
