"""
Validation Tools for the BPMN Modeler

Rule-based semantic checks over a process graph snapshot:
- Start/end event presence
- Element connectivity
- Exclusive gateway conditions
- Service task implementations
- Sequence flow references

Validation never raises and never mutates the process; it returns
diagnostics in rule order, then element insertion order.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional

from bpmn_modeler.models.bpmn_elements import BPMNElementType

if TYPE_CHECKING:
    from bpmn_modeler.models.process import BPMNProcess

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A validation finding, optionally scoped to one element or flow."""

    severity: Severity
    message: str
    element_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "elementId": self.element_id,
        }


IMPLEMENTATION_PROPERTIES = ("implementation", "javaClass", "topic")


class ProcessValidator:
    """Evaluates the validation rules in a fixed order."""

    def __init__(self):
        """Initialize validator with the ordered rule list."""
        self.rules: List[Callable[["BPMNProcess"], Iterable[Diagnostic]]] = [
            self._check_start_event,
            self._check_end_event,
            self._check_incoming,
            self._check_outgoing,
            self._check_exclusive_gateway_conditions,
            self._check_service_task_implementation,
            self._check_flow_references,
        ]

    def validate(self, process: "BPMNProcess") -> List[Diagnostic]:
        """Validate a process.

        Args:
            process: Process to check (not modified)

        Returns:
            Ordered list of diagnostics
        """
        diagnostics: List[Diagnostic] = []
        for rule in self.rules:
            diagnostics.extend(rule(process))

        logger.debug(f"Validated process {process.id}: {summarize(diagnostics)}")
        return diagnostics

    def _check_start_event(self, process: "BPMNProcess") -> Iterable[Diagnostic]:
        if not any(e.type == BPMNElementType.START_EVENT for e in process.get_elements()):
            yield Diagnostic(Severity.ERROR, "Process must have at least one start event")

    def _check_end_event(self, process: "BPMNProcess") -> Iterable[Diagnostic]:
        if not any(e.type == BPMNElementType.END_EVENT for e in process.get_elements()):
            yield Diagnostic(Severity.WARNING, "Process should have at least one end event")

    def _check_incoming(self, process: "BPMNProcess") -> Iterable[Diagnostic]:
        for element in process.get_elements():
            if element.type != BPMNElementType.START_EVENT and not element.incoming:
                yield Diagnostic(
                    Severity.ERROR,
                    f"Element {element.id} has no incoming connections",
                    element.id,
                )

    def _check_outgoing(self, process: "BPMNProcess") -> Iterable[Diagnostic]:
        for element in process.get_elements():
            if element.type != BPMNElementType.END_EVENT and not element.outgoing:
                yield Diagnostic(
                    Severity.ERROR,
                    f"Element {element.id} has no outgoing connections",
                    element.id,
                )

    def _check_exclusive_gateway_conditions(
        self, process: "BPMNProcess"
    ) -> Iterable[Diagnostic]:
        for element in process.get_elements():
            if element.type != BPMNElementType.EXCLUSIVE_GATEWAY or len(element.outgoing) <= 1:
                continue
            flows = [process.get_flow(flow_id) for flow_id in element.outgoing]
            if not any(flow is not None and flow.condition_expression for flow in flows):
                yield Diagnostic(
                    Severity.WARNING,
                    "Exclusive gateway should have conditions on outgoing flows",
                    element.id,
                )

    def _check_service_task_implementation(
        self, process: "BPMNProcess"
    ) -> Iterable[Diagnostic]:
        for element in process.get_elements():
            if element.type != BPMNElementType.SERVICE_TASK:
                continue
            if not any(element.properties.get(key) for key in IMPLEMENTATION_PROPERTIES):
                yield Diagnostic(
                    Severity.ERROR,
                    "Service task must have an implementation",
                    element.id,
                )

    def _check_flow_references(self, process: "BPMNProcess") -> Iterable[Diagnostic]:
        for flow in process.get_sequence_flows():
            for ref in (flow.source_ref, flow.target_ref):
                if not process.has_element(ref):
                    yield Diagnostic(
                        Severity.ERROR,
                        f"Sequence flow {flow.id} references unknown element {ref}",
                        flow.id,
                    )


_default_validator = ProcessValidator()


def validate_process(process: "BPMNProcess") -> List[Diagnostic]:
    """Validate a process with the default rule set."""
    return _default_validator.validate(process)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    """Whether any diagnostic is blocking (severity ``error``)."""
    return any(d.severity == Severity.ERROR for d in diagnostics)


def summarize(diagnostics: Iterable[Diagnostic]) -> Dict[str, int]:
    """Count diagnostics per severity."""
    counts = Counter(d.severity.value for d in diagnostics)
    return {severity.value: counts.get(severity.value, 0) for severity in Severity}


__all__ = [
    "Severity",
    "Diagnostic",
    "ProcessValidator",
    "validate_process",
    "has_errors",
    "summarize",
]
