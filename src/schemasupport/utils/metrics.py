"""
Prometheus metrics for schemasupport runs.

A run is a short-lived process, so instead of serving /metrics the CLI can
push the collected values to a Pushgateway once the run finishes.

Usage:
    metrics = MigrationMetrics()
    metrics.record_run(stats, dry_run=False, duration=1.4)
    metrics.push("pushgateway:9091")
"""

import logging

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    push_to_gateway,
)

logger = logging.getLogger(__name__)


class MigrationMetrics:
    """
    Metrics for change file runs

    Uses its own registry by default so several instances (tests, embedded
    use) never collide on metric names in the global registry.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.runs_total = Counter(
            "schemasupport_runs_total",
            "Total number of schemasupport runs",
            ["mode", "status"],
            registry=self.registry,
        )

        self.failures_total = Counter(
            "schemasupport_failures_total",
            "Failed runs by error type",
            ["error_type"],
            registry=self.registry,
        )

        self.files_discovered = Gauge(
            "schemasupport_files_discovered",
            "Change files discovered in the last run",
            registry=self.registry,
        )

        self.files_applied_total = Counter(
            "schemasupport_files_applied_total",
            "Change files applied (or planned, in dry run mode)",
            ["mode"],
            registry=self.registry,
        )

        self.run_duration_seconds = Histogram(
            "schemasupport_run_duration_seconds",
            "Duration of schemasupport runs in seconds",
            ["mode"],
            buckets=(0.1, 0.5, 1, 5, 10, 30, 60, 300, 900),
            registry=self.registry,
        )

        self.last_success_timestamp = Gauge(
            "schemasupport_last_success_timestamp",
            "Unix time of the last successful run",
            registry=self.registry,
        )

    @staticmethod
    def _mode(dry_run: bool) -> str:
        return "dry_run" if dry_run else "apply"

    def record_run(self, stats, dry_run: bool, duration: float) -> None:
        """Record a successful run"""
        mode = self._mode(dry_run)
        self.runs_total.labels(mode=mode, status="success").inc()
        self.files_discovered.set(stats.discovered)
        self.files_applied_total.labels(mode=mode).inc(stats.applied)
        self.run_duration_seconds.labels(mode=mode).observe(duration)
        self.last_success_timestamp.set_to_current_time()

    def record_failure(self, error: Exception, dry_run: bool, duration: float) -> None:
        """Record a failed run"""
        mode = self._mode(dry_run)
        self.runs_total.labels(mode=mode, status="failure").inc()
        self.failures_total.labels(error_type=type(error).__name__).inc()
        self.run_duration_seconds.labels(mode=mode).observe(duration)

    def push(self, gateway: str, job: str = "schemasupport") -> None:
        """Push all metrics in this registry to a Prometheus Pushgateway"""
        push_to_gateway(gateway, job=job, registry=self.registry)
        logger.info(f"Pushed metrics to {gateway} (job={job})")
