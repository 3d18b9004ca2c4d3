import asyncio
import logging
import sys

import config
from benchmark_driver import run_benchmark

# Global logger setup for the application
logger = logging.getLogger() # Get root logger


def setup_logging():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format=config.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(config.LOG_FILE, mode='w')
        ]
    )
    logger.info(f"Logging setup complete. Log file: {config.LOG_FILE}")


def main(bench_config: config.BenchmarkConfig = None) -> int:
    bench_config = bench_config or config.default_config()
    try:
        # Fail on bad settings before the event loop or any socket exists
        config.validate_config(bench_config)
        asyncio.run(run_benchmark(bench_config))
    except config.ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Benchmark interrupted by user (Ctrl+C).")
        return 130
    return 0


if __name__ == "__main__":
    setup_logging() # Call this once at the beginning
    sys.exit(main())
