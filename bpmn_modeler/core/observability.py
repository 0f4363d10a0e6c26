"""
Observability Infrastructure

Provides structured logging, tracing, and metrics collection for the modeler.
Logging sinks are configured with loguru; metrics and spans go through
OpenTelemetry.
"""

import contextlib
import sys
import time
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

from loguru import logger
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import Span


class LogLevel(str, Enum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObservabilityConfig:
    """Configuration for observability."""

    def __init__(
        self,
        service_name: str = "bpmn-modeler",
        log_level: Union[str, LogLevel] = LogLevel.INFO,
        json_logs: bool = False,
        enable_tracing: bool = False,
        enable_metrics: bool = True,
    ):
        """Initialize observability configuration."""
        self.service_name = service_name
        self.log_level = log_level.value if isinstance(log_level, LogLevel) else log_level
        self.json_logs = json_logs
        self.enable_tracing = enable_tracing
        self.enable_metrics = enable_metrics


class ObservabilityManager:
    """Centralized observability management."""

    _instance: Optional["ObservabilityManager"] = None

    def __init__(self, config: ObservabilityConfig):
        """Initialize observability manager."""
        self.config = config
        self.metric_reader: Optional[InMemoryMetricReader] = None
        self.span_exporter: Optional[InMemorySpanExporter] = None
        self._setup_logging()

        if config.enable_tracing:
            self._setup_tracing()

        if config.enable_metrics:
            self._setup_metrics()

        logger.debug(
            f"Observability initialized: service={config.service_name}, "
            f"log_level={config.log_level}"
        )

    def _setup_logging(self) -> None:
        """Set up logging sinks with loguru."""
        # Remove default handler
        logger.remove()

        # stdout carries XML output, logs go to stderr
        if self.config.json_logs:
            logger.add(
                sys.stderr,
                level=self.config.log_level,
                serialize=True,
                colorize=False,
            )
        else:
            log_format = (
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
                "<level>{message}</level>"
            )
            logger.add(
                sys.stderr,
                format=log_format,
                level=self.config.log_level,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )

    def _setup_tracing(self) -> None:
        """Set up OpenTelemetry tracing.

        Finished spans are kept by an in-memory exporter.
        """
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        self.span_exporter = InMemorySpanExporter()
        tracer_provider = TracerProvider(resource=resource)
        tracer_provider.add_span_processor(SimpleSpanProcessor(self.span_exporter))
        self.tracer = tracer_provider.get_tracer(__name__)
        logger.debug("OpenTelemetry tracing initialized")

    def _setup_metrics(self) -> None:
        """Set up OpenTelemetry metrics."""
        self.metric_reader = InMemoryMetricReader()

        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        meter_provider = MeterProvider(resource=resource, metric_readers=[self.metric_reader])
        self.meter = meter_provider.get_meter(__name__)

        self.counter = self.meter.create_counter(
            "operations_total",
            description="Total number of modeler operations",
            unit="1",
        )
        self.histogram = self.meter.create_histogram(
            "operation_duration_ms",
            description="Operation duration in milliseconds",
            unit="ms",
        )

    @classmethod
    def initialize(cls, config: Optional[ObservabilityConfig] = None) -> "ObservabilityManager":
        """Initialize (or re-initialize) the shared instance."""
        cls._instance = cls(config or ObservabilityConfig())
        return cls._instance

    @classmethod
    def get_instance(cls) -> Optional["ObservabilityManager"]:
        """Get the shared instance, if one was initialized."""
        return cls._instance


@contextlib.contextmanager
def span(name: str, attributes: Optional[Dict[str, Any]] = None) -> Iterator[Optional[Span]]:
    """Context manager for creating spans (yields None when tracing is off)."""
    manager = ObservabilityManager.get_instance()

    if manager is not None and hasattr(manager, "tracer"):
        with manager.tracer.start_as_current_span(name) as span_obj:
            if attributes:
                for key, value in attributes.items():
                    span_obj.set_attribute(key, value)
            yield span_obj
    else:
        yield None


def record_metric(
    metric_name: str,
    value: Union[int, float],
    attributes: Optional[Dict[str, str]] = None,
) -> None:
    """
    Record a metric value with OpenTelemetry.

    Falls back to a debug log line when metrics were not initialized.

    Args:
        metric_name: Name of the metric
        value: Metric value
        attributes: Optional attributes for the metric
    """
    manager = ObservabilityManager.get_instance()
    metric_attributes = {"metric": metric_name, **(attributes or {})}

    if manager is not None and hasattr(manager, "counter"):
        if metric_name.endswith("_total") or isinstance(value, int):
            manager.counter.add(value, attributes=metric_attributes)
        else:
            manager.histogram.record(value, attributes=metric_attributes)

    logger.debug(f"Metric recorded: {metric_name}={value}")


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, log: bool = True):
        """Initialize timer."""
        self.name = name
        self.log = log
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        """Enter context."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context."""
        self.elapsed = time.perf_counter() - self.start_time
        if self.log:
            logger.debug(f"Timer '{self.name}': {self.elapsed:.3f}s")
            record_metric(f"{self.name}_duration", self.elapsed * 1000)


__all__ = [
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "span",
    "record_metric",
    "Timer",
]
