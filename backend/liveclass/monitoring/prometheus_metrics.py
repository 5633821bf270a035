"""
Prometheus metrics for the live class gateway.

Service operations are recorded by the @measure_operation decorator; domain
counters cover admissions, meeting creation and the reconciliation sweep.
"""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "liveclass_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

service_operations_total = Counter(
    "liveclass_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "liveclass_errors_total",
    "Total number of service errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

admissions_total = Counter(
    "liveclass_admissions_total",
    "Start/join admission decisions",
    ["action", "outcome"],
    registry=REGISTRY,
)

meetings_created_total = Counter(
    "liveclass_meetings_created_total",
    "Remote meetings created by the meeting lease",
    ["outcome"],
    registry=REGISTRY,
)

sessions_synced_total = Counter(
    "liveclass_sessions_synced_total",
    "Provider sessions processed by the reconciliation sweep",
    ["result"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade so call sites do not touch metric objects directly."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'LiveClassService')
            operation: Operation/method name (e.g., 'join_class')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_admission(action: str, outcome: str) -> None:
        admissions_total.labels(action=action, outcome=outcome).inc()

    @staticmethod
    def record_meeting_created(outcome: str) -> None:
        meetings_created_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_session_sync(result: str, count: int = 1) -> None:
        if count:
            sessions_synced_total.labels(result=result).inc(count)

    @staticmethod
    def get_metrics() -> bytes:
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
