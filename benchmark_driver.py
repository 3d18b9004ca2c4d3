import asyncio
import logging
import time
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional

from config import BenchmarkConfig, validate_config
from executor import RequestExecutor
from http_clients import ClientStrategy
from metrics import InsufficientDataError, RunMetrics, calculate_metrics, format_report, save_summary

logger = logging.getLogger(__name__)

STRATEGY_LABELS = {
    ClientStrategy.POOLED: "Pooled client (keep-alive)",
    ClientStrategy.DEFAULT: "Default client (one-shot)",
}


class StrategyRun(NamedTuple):
    strategy: ClientStrategy
    batch_sizes: List[int]
    latencies_ms: List[float]
    failed_requests: int
    total_time_ms: float
    metrics: Optional[RunMetrics]  # None when no request succeeded


def batch_sizes(total_requests: int, concurrency: int) -> Iterator[int]:
    dispatched = 0
    while dispatched < total_requests:
        size = min(concurrency, total_requests - dispatched)
        yield size
        dispatched += size


async def run_batch(executor, url: str, size: int) -> List[Optional[float]]:
    # gather keeps dispatch order and only returns once every request resolved
    return list(await asyncio.gather(*(executor.execute(url) for _ in range(size))))


async def run_strategy(config: BenchmarkConfig, strategy: ClientStrategy,
                       executor_factory: Callable = RequestExecutor) -> StrategyRun:
    label = STRATEGY_LABELS.get(strategy, strategy.value)
    latencies_ms: List[float] = []
    sizes: List[int] = []
    failed = 0

    async with executor_factory(strategy, config) as executor:
        start_time = time.perf_counter()
        for size in batch_sizes(config.total_requests, config.concurrency):
            results = await run_batch(executor, config.target_url, size)
            sizes.append(size)
            ok = [r for r in results if r is not None]
            failed += size - len(ok)
            latencies_ms.extend(ok)
            logger.debug(f"{label}: batch {len(sizes)} done, {len(ok)}/{size} ok")
        total_time_ms = (time.perf_counter() - start_time) * 1000

    try:
        run_metrics = calculate_metrics(latencies_ms, config.total_requests, total_time_ms)
    except InsufficientDataError as e:
        run_metrics = None
        logger.error(f"{label}: insufficient data ({e}); {failed}/{config.total_requests} requests failed "
                     f"in {total_time_ms:.2f}ms")
    else:
        for line in format_report(label, run_metrics):
            logger.info(line)
        if failed:
            logger.warning(f"{label}: {failed}/{config.total_requests} requests failed; "
                           f"latency figures cover successful requests only")

    return StrategyRun(strategy, sizes, latencies_ms, failed, total_time_ms, run_metrics)


async def run_benchmark(config: BenchmarkConfig,
                        strategies: Iterable[ClientStrategy] = (ClientStrategy.POOLED, ClientStrategy.DEFAULT),
                        executor_factory: Callable = RequestExecutor) -> List[StrategyRun]:
    validate_config(config)
    logger.info(f"Running benchmark with {config.total_requests} total requests, "
                f"{config.concurrency} concurrent")
    logger.info(f"Target: {config.target_url}")

    runs: List[StrategyRun] = []
    # One strategy at a time so their network activity never overlaps
    for strategy in strategies:
        run = await run_strategy(config, strategy, executor_factory)
        runs.append(run)
        if config.results_dir:
            save_summary(config.results_dir, run, config)

    logger.info("Benchmark finished.")
    return runs
