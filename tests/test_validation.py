"""
Tests for process validation.

Tests:
- Start/end event rules
- Connectivity rules
- Exclusive gateway condition rule
- Service task implementation rule
- Dangling sequence flow references
- Ordering, idempotence and helpers
"""

import pytest

from bpmn_modeler.models.bpmn_elements import BPMNElementType
from bpmn_modeler.models.process import BPMNProcess
from bpmn_modeler.tools.validation import (
    Diagnostic,
    ProcessValidator,
    Severity,
    has_errors,
    summarize,
    validate_process,
)


def _messages(diagnostics):
    return [d.message for d in diagnostics]


def _connected_process(*element_types):
    """Start -> each element in order -> End, all connected."""
    process = BPMNProcess()
    previous = process.get_elements()[0]
    created = []
    for element_type in element_types:
        element = process.add_element(element_type)
        process.add_sequence_flow(previous.id, element.id)
        created.append(element)
        previous = element
    end = process.add_element(BPMNElementType.END_EVENT)
    process.add_sequence_flow(previous.id, end.id)
    return process, created


def _gateway_process(condition=None):
    """Start -> exclusive gateway -> two end events, one flow optionally guarded."""
    process, (gateway,) = _connected_process(BPMNElementType.EXCLUSIVE_GATEWAY)
    branch = process.add_element(BPMNElementType.END_EVENT)
    process.add_sequence_flow(gateway.id, branch.id, condition_expression=condition)
    return process, gateway


# ===========================
# Event Rules
# ===========================


class TestEventRules:
    """Test start and end event rules."""

    def test_valid_linear_process(self, linear_process):
        assert linear_process.validate() == []

    def test_missing_start_event(self):
        process = BPMNProcess()
        process.remove_element(process.get_elements()[0].id)

        diagnostics = process.validate()

        assert diagnostics[0] == Diagnostic(
            Severity.ERROR, "Process must have at least one start event"
        )
        assert has_errors(diagnostics)

    def test_missing_end_event_is_warning(self, process):
        diagnostics = process.validate()

        end_warnings = [d for d in diagnostics if "end event" in d.message]
        assert len(end_warnings) == 1
        assert end_warnings[0].severity == Severity.WARNING
        assert end_warnings[0].message == "Process should have at least one end event"
        assert end_warnings[0].element_id is None

    def test_fresh_process_diagnostics(self, process):
        """A new process reports the missing end event and the unconnected start."""
        start = process.get_elements()[0]

        assert process.validate() == [
            Diagnostic(Severity.WARNING, "Process should have at least one end event"),
            Diagnostic(Severity.ERROR, f"Element {start.id} has no outgoing connections", start.id),
        ]


# ===========================
# Connectivity Rules
# ===========================


class TestConnectivityRules:
    """Test incoming and outgoing connection rules."""

    def test_unconnected_task(self, process):
        task = process.add_element(BPMNElementType.USER_TASK)

        messages = _messages(process.validate())

        assert f"Element {task.id} has no incoming connections" in messages
        assert f"Element {task.id} has no outgoing connections" in messages

    def test_start_event_needs_no_incoming(self, linear_process):
        start = linear_process.get_elements()[0]
        messages = _messages(linear_process.validate())
        assert not any(start.id in m for m in messages)

    def test_end_event_needs_no_outgoing(self):
        process = BPMNProcess()
        start = process.get_elements()[0]
        end = process.add_element(BPMNElementType.END_EVENT)
        process.add_sequence_flow(start.id, end.id)

        assert process.validate() == []

    def test_incoming_errors_precede_outgoing_errors(self, process):
        first = process.add_element(BPMNElementType.USER_TASK)
        second = process.add_element(BPMNElementType.USER_TASK)

        messages = _messages(process.validate())

        assert messages.index(f"Element {first.id} has no incoming connections") < messages.index(
            f"Element {second.id} has no incoming connections"
        )
        assert messages.index(f"Element {second.id} has no incoming connections") < messages.index(
            f"Element {first.id} has no outgoing connections"
        )


# ===========================
# Gateway Rules
# ===========================


class TestGatewayRules:
    """Test exclusive gateway condition rule."""

    def test_exclusive_gateway_without_conditions(self):
        process, gateway = _gateway_process()

        diagnostics = process.validate()

        assert diagnostics == [
            Diagnostic(
                Severity.WARNING,
                "Exclusive gateway should have conditions on outgoing flows",
                gateway.id,
            )
        ]
        assert not has_errors(diagnostics)

    def test_exclusive_gateway_with_one_condition(self):
        process, _ = _gateway_process(condition="${approved}")
        assert process.validate() == []

    def test_exclusive_gateway_single_outgoing_needs_no_condition(self):
        process, _ = _connected_process(BPMNElementType.EXCLUSIVE_GATEWAY)
        assert process.validate() == []

    def test_parallel_gateway_needs_no_conditions(self):
        process, (gateway,) = _connected_process(BPMNElementType.PARALLEL_GATEWAY)
        branch = process.add_element(BPMNElementType.END_EVENT)
        process.add_sequence_flow(gateway.id, branch.id)
        assert process.validate() == []


# ===========================
# Service Task Rules
# ===========================


class TestServiceTaskRules:
    """Test service task implementation rule."""

    def test_service_task_without_implementation(self):
        process, (task,) = _connected_process(BPMNElementType.SERVICE_TASK)

        assert process.validate() == [
            Diagnostic(Severity.ERROR, "Service task must have an implementation", task.id)
        ]

    @pytest.mark.parametrize(
        "properties",
        [
            {"implementation": "external", "topic": "payments"},
            {"javaClass": "com.example.Delegate"},
            {"topic": "payments"},
        ],
    )
    def test_service_task_with_implementation(self, properties):
        process, (task,) = _connected_process(BPMNElementType.SERVICE_TASK)
        process.update_element(task.id, properties)
        assert process.validate() == []

    def test_service_task_empty_implementation_is_missing(self):
        process, (task,) = _connected_process(BPMNElementType.SERVICE_TASK)
        process.update_element(task.id, {"javaClass": ""})
        assert has_errors(process.validate())


# ===========================
# Flow Reference Rules
# ===========================


class TestFlowReferenceRules:
    """Test dangling sequence flow references."""

    def test_dangling_flow_is_reported(self, process):
        start = process.get_elements()[0]
        end = process.add_element(BPMNElementType.END_EVENT)
        process.add_sequence_flow(start.id, end.id)
        ghost_flow = process.add_sequence_flow(start.id, "Ghost_1")

        diagnostics = process.validate()

        assert diagnostics[-1] == Diagnostic(
            Severity.ERROR,
            f"Sequence flow {ghost_flow.id} references unknown element Ghost_1",
            ghost_flow.id,
        )

    def test_flow_reference_errors_come_last(self, process):
        process.add_sequence_flow("Ghost_a", "Ghost_b")
        diagnostics = process.validate()
        assert [d.element_id for d in diagnostics[-2:]] == [
            process.get_sequence_flows()[0].id
        ] * 2


# ===========================
# Behaviour and Helpers
# ===========================


class TestBehaviourAndHelpers:
    """Test validation purity and helper functions."""

    def test_validation_is_idempotent_and_pure(self, linear_process):
        process = linear_process
        process.add_element(BPMNElementType.SERVICE_TASK)
        snapshot = [e.model_dump() for e in process.get_elements()]

        first = process.validate()
        second = process.validate()

        assert first == second
        assert [e.model_dump() for e in process.get_elements()] == snapshot

    def test_validate_process_matches_method(self, linear_process):
        linear_process.add_element(BPMNElementType.USER_TASK)
        assert validate_process(linear_process) == linear_process.validate()
        assert ProcessValidator().validate(linear_process) == linear_process.validate()

    def test_diagnostic_to_dict(self):
        diagnostic = Diagnostic(Severity.ERROR, "boom", "Task_1")
        assert diagnostic.to_dict() == {
            "severity": "error",
            "message": "boom",
            "elementId": "Task_1",
        }

    def test_summarize_and_has_errors(self):
        diagnostics = [
            Diagnostic(Severity.WARNING, "w"),
            Diagnostic(Severity.ERROR, "e1"),
            Diagnostic(Severity.ERROR, "e2"),
        ]
        assert summarize(diagnostics) == {"error": 2, "warning": 1}
        assert summarize([]) == {"error": 0, "warning": 0}
        assert has_errors(diagnostics)
        assert not has_errors(diagnostics[:1])
