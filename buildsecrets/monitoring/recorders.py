"""Metrics recorder - stateless functions to record metrics."""

import time
from contextlib import contextmanager
from typing import Generator

from buildsecrets.monitoring.definitions import (
    BACKEND_ATTEMPTS,
    BACKEND_LATENCY,
    PROVISION_FAILURES,
    SECRETS_PROVISIONED,
)


@contextmanager
def track_time() -> Generator[dict, None, None]:
    """
    Context manager to track execution time.

    Usage:
        with track_time() as t:
            do_work()
        print(t["duration"])  # seconds
    """
    result = {"duration": 0.0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        result["duration"] = time.perf_counter() - start


class Metrics:
    """
    Stateless metrics recorder.

    Usage:
        from buildsecrets.monitoring import Metrics, track_time

        with track_time() as t:
            run_backend()
        Metrics.backend_attempt("sops", success=True, latency=t["duration"])
    """

    @staticmethod
    def backend_attempt(backend: str, success: bool, latency: float = None) -> None:
        """Record one backend decryption attempt."""
        status = "success" if success else "error"
        BACKEND_ATTEMPTS.labels(backend=backend, status=status).inc()
        if latency:
            BACKEND_LATENCY.labels(backend=backend).observe(latency)

    @staticmethod
    def secret_provisioned() -> None:
        SECRETS_PROVISIONED.inc()

    @staticmethod
    def provision_failure(reason: str) -> None:
        """Record an aborted run, labelled by error class name."""
        PROVISION_FAILURES.labels(reason=reason).inc()
