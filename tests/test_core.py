"""
Tests for configuration, ID generation and observability helpers.
"""

import re

import pytest
from loguru import logger

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.exceptions import IdGenerationError
from bpmn_modeler.core.ids import MAX_ID_ATTEMPTS, generate_unique_id, random_suffix
from bpmn_modeler.core.observability import (
    LogLevel,
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    record_metric,
    span,
)


@pytest.fixture
def manager():
    yield ObservabilityManager.initialize(ObservabilityConfig(log_level=LogLevel.WARNING))
    logger.remove()
    ObservabilityManager._instance = None


@pytest.fixture
def tracing_manager():
    yield ObservabilityManager.initialize(
        ObservabilityConfig(log_level=LogLevel.WARNING, enable_tracing=True)
    )
    logger.remove()
    ObservabilityManager._instance = None


# ===========================
# Configuration
# ===========================


class TestConfiguration:
    """Test ModelerConfig defaults and environment loading."""

    def test_config_defaults(self):
        config = ModelerConfig()
        assert config.default_process_name == "New Process"
        assert config.version_tag == "1.0.0"
        assert config.history_time_to_live == "P30D"
        assert config.execution_platform == "Camunda Platform"

    def test_config_from_env(self, monkeypatch):
        monkeypatch.setenv("BPMN_MODELER_VERSION_TAG", "3.0.0")
        monkeypatch.setenv("BPMN_MODELER_HISTORY_TIME_TO_LIVE", "P90D")
        monkeypatch.setenv("BPMN_MODELER_LOG_LEVEL", "debug")

        config = ModelerConfig.from_env()

        assert config.version_tag == "3.0.0"
        assert config.history_time_to_live == "P90D"
        assert config.log_level == "DEBUG"
        assert config.exporter == ModelerConfig().exporter


# ===========================
# ID Generation
# ===========================


class TestIDGeneration:
    """Test ID suffixes and collision handling."""

    def test_random_suffix_format(self):
        """Suffixes are 8 alphanumerics; uniqueness comes from the retry, not the suffix."""
        for _ in range(1000):
            assert re.match(r"^[a-zA-Z0-9]{8}$", random_suffix())

    def test_generate_unique_id_skips_taken(self):
        values = iter(["a", "b"])
        assert generate_unique_id("Task", {"Task_a"}, lambda: next(values)) == "Task_b"

    def test_generate_unique_id_gives_up(self):
        calls = []

        def generator():
            calls.append(1)
            return "x"

        with pytest.raises(IdGenerationError):
            generate_unique_id("Task", {"Task_x"}, generator)
        assert len(calls) == MAX_ID_ATTEMPTS


# ===========================
# Observability
# ===========================


class TestObservability:
    """Test metrics, tracing and timing helpers."""

    def test_timer_measures_elapsed(self):
        with Timer("unit", log=False) as timer:
            sum(range(1000))
        assert timer.elapsed > 0

    def test_span_without_manager_yields_none(self):
        ObservabilityManager._instance = None
        with span("noop") as span_obj:
            assert span_obj is None

    def test_manager_sets_up_metrics(self, manager):
        assert ObservabilityManager.get_instance() is manager
        assert manager.config.log_level == "WARNING"
        assert manager.metric_reader is not None

    def test_record_metric_reaches_reader(self, manager):
        record_metric("elements_total", 3)
        record_metric("xml_generation_duration", 1.5)

        data = manager.metric_reader.get_metrics_data()
        names = {
            metric.name
            for resource_metrics in data.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
        }
        assert names == {"operations_total", "operation_duration_ms"}

    def test_timer_records_duration(self, manager):
        with Timer("xml_generation"):
            pass

        data = manager.metric_reader.get_metrics_data()
        metric_names = [
            metric.name
            for resource_metrics in data.resource_metrics
            for scope_metrics in resource_metrics.scope_metrics
            for metric in scope_metrics.metrics
        ]
        assert "operation_duration_ms" in metric_names

    def test_tracing_disabled_by_default(self, manager):
        assert manager.span_exporter is None
        with span("noop") as span_obj:
            assert span_obj is None

    def test_span_records_name_and_attributes(self, tracing_manager):
        with span("xml_generation", {"process": "Process_1"}) as span_obj:
            assert span_obj is not None
            assert span_obj.is_recording()

        finished = tracing_manager.span_exporter.get_finished_spans()
        assert [s.name for s in finished] == ["xml_generation"]
        assert finished[0].attributes["process"] == "Process_1"
        assert finished[0].end_time >= finished[0].start_time

    def test_nested_spans_share_a_trace(self, tracing_manager):
        with span("outer"):
            with span("inner"):
                pass

        inner, outer = tracing_manager.span_exporter.get_finished_spans()
        assert inner.parent.span_id == outer.context.span_id
        assert inner.context.trace_id == outer.context.trace_id
