import logging
from typing import NamedTuple, Optional
from urllib.parse import urlsplit

import httpx

# Logging
LOG_LEVEL = logging.INFO  # DEBUG also logs per-batch progress
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s'
LOG_FILE = "http_client_bench.log"  # Overwritten on every run
RESULTS_DIR = None  # Set to e.g. "results" to append a CSV summary per run

# Benchmark Config
TEST_URL = "https://api.example.com/endpoint"  # Replace with your test endpoint
TOTAL_REQUESTS = 1000
CONCURRENT_REQUESTS = 50
POOL_CAPACITY = 50  # Max sockets kept by the pooled client
REQUEST_TIMEOUT_SECONDS = None  # None waits forever, like the plain clients do


class ConfigError(ValueError):
    pass


class BenchmarkConfig(NamedTuple):
    target_url: str
    total_requests: int = TOTAL_REQUESTS
    concurrency: int = CONCURRENT_REQUESTS
    pool_capacity: int = POOL_CAPACITY
    request_timeout_s: Optional[float] = REQUEST_TIMEOUT_SECONDS
    results_dir: Optional[str] = RESULTS_DIR


def default_config() -> BenchmarkConfig:
    return BenchmarkConfig(target_url=TEST_URL)


def _check_positive_int(name: str, value) -> None:
    # bool is an int subclass; True is not a request count
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")


def validate_config(config: BenchmarkConfig) -> BenchmarkConfig:
    """Reject a configuration before any request goes out.

    Returns the config unchanged so callers can validate inline.
    """
    url = config.target_url
    if not isinstance(url, str) or not url.strip():
        raise ConfigError("target_url must be a non-empty string")
    # urlsplit silently drops tab/CR/LF, so check the raw string first
    if any(ch.isspace() or not ch.isprintable() for ch in url):
        raise ConfigError(f"Malformed target_url {url!r}: whitespace or control character")
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a garbage port
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL) as e:
        raise ConfigError(f"Malformed target_url {url!r}: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigError(f"Malformed target_url {url!r}: expected http(s)://host[:port]/path")

    _check_positive_int("total_requests", config.total_requests)
    _check_positive_int("concurrency", config.concurrency)
    _check_positive_int("pool_capacity", config.pool_capacity)

    timeout = config.request_timeout_s
    if timeout is not None and (isinstance(timeout, bool)
                                or not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ConfigError(f"request_timeout_s must be positive or None, got {timeout!r}")
    return config
