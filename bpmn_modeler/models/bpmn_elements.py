"""
BPMN 2.0 Process Element Model

Pydantic-based models for the nodes and sequence flows of an editable
process graph, aligned with the BPMN 2.0 specification:
https://www.omg.org/spec/BPMN/2.0.2/

Element kinds form an open set. Per-kind subclasses expose typed accessors
over the shared ``properties`` mapping; tags without a subclass use
``BPMNElement`` directly.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BPMNElementType(str, Enum):
    """Known BPMN element type tags."""

    START_EVENT = "bpmn:StartEvent"
    END_EVENT = "bpmn:EndEvent"
    USER_TASK = "bpmn:UserTask"
    SERVICE_TASK = "bpmn:ServiceTask"
    SCRIPT_TASK = "bpmn:ScriptTask"
    BUSINESS_RULE_TASK = "bpmn:BusinessRuleTask"
    SEND_TASK = "bpmn:SendTask"
    RECEIVE_TASK = "bpmn:ReceiveTask"
    MANUAL_TASK = "bpmn:ManualTask"
    EXCLUSIVE_GATEWAY = "bpmn:ExclusiveGateway"
    PARALLEL_GATEWAY = "bpmn:ParallelGateway"
    INCLUSIVE_GATEWAY = "bpmn:InclusiveGateway"
    EVENT_BASED_GATEWAY = "bpmn:EventBasedGateway"
    INTERMEDIATE_CATCH_EVENT = "bpmn:IntermediateCatchEvent"
    INTERMEDIATE_THROW_EVENT = "bpmn:IntermediateThrowEvent"
    BOUNDARY_EVENT = "bpmn:BoundaryEvent"
    SUBPROCESS = "bpmn:SubProcess"
    CALL_ACTIVITY = "bpmn:CallActivity"
    SEQUENCE_FLOW = "bpmn:SequenceFlow"


class ListenerType(str, Enum):
    """Execution listener implementation variants."""

    CLASS = "class"
    EXPRESSION = "expression"
    DELEGATE_EXPRESSION = "delegateExpression"
    SCRIPT = "script"


def type_tag(element_type: Any) -> str:
    """Return the plain string tag for an enum member or string."""
    return element_type.value if isinstance(element_type, Enum) else str(element_type)


def local_type_name(element_type: Any) -> str:
    """Strip the namespace prefix: ``bpmn:UserTask`` -> ``UserTask``."""
    return type_tag(element_type).split(":")[-1]


class Position(BaseModel):
    """Diagram position of an element."""

    x: float = Field(..., description="X coordinate")
    y: float = Field(..., description="Y coordinate")


class Size(BaseModel):
    """Diagram size of an element."""

    width: float = Field(..., description="Width")
    height: float = Field(..., description="Height")


class ExecutionListener(BaseModel):
    """Execution listener attached to an element."""

    event: str = Field(..., description="Lifecycle event (start, end, take)")
    listener_type: ListenerType = Field(..., alias="listenerType", description="Variant")
    java_class: Optional[str] = Field(None, alias="class", description="Java delegate class")
    expression: Optional[str] = Field(None, description="Expression to evaluate")
    delegate_expression: Optional[str] = Field(
        None, alias="delegateExpression", description="Expression resolving to a delegate"
    )
    script: Optional[str] = Field(None, description="Inline script body")
    script_format: Optional[str] = Field(
        None, alias="scriptFormat", description="Script language (e.g. 'groovy')"
    )

    model_config = ConfigDict(populate_by_name=True)

    @property
    def payload(self) -> Optional[str]:
        """Value of the field selected by ``listener_type``."""
        if self.listener_type == ListenerType.CLASS:
            return self.java_class
        if self.listener_type == ListenerType.EXPRESSION:
            return self.expression
        if self.listener_type == ListenerType.DELEGATE_EXPRESSION:
            return self.delegate_expression
        return self.script


class Parameter(BaseModel):
    """Input or output mapping parameter."""

    name: str = Field(..., description="Variable name")
    value: str = Field("", description="Value or expression")
    type: Optional[str] = Field(None, description="Optional value type")


class BPMNElement(BaseModel):
    """A node in the process graph."""

    id: str = Field(..., description="Unique element ID")
    type: str = Field(..., description="Element type tag, e.g. 'bpmn:UserTask'")
    name: Optional[str] = Field(None, description="Element name/label")
    documentation: Optional[str] = Field(None, description="Element documentation")
    properties: Dict[str, Any] = Field(
        default_factory=dict, description="Generic and vendor-specific attributes"
    )

    position: Optional[Position] = Field(None, description="Diagram position")
    size: Optional[Size] = Field(None, description="Diagram size")

    execution_listeners: List[ExecutionListener] = Field(default_factory=list)
    input_parameters: List[Parameter] = Field(default_factory=list)
    output_parameters: List[Parameter] = Field(default_factory=list)

    incoming: List[str] = Field(default_factory=list, description="Incoming sequence flow IDs")
    outgoing: List[str] = Field(default_factory=list, description="Outgoing sequence flow IDs")

    model_config = ConfigDict(use_enum_values=False)

    @property
    def local_type(self) -> str:
        return local_type_name(self.type)


class StartEvent(BPMNElement):
    """Start Event (process initiation point)."""

    @property
    def form_key(self) -> Optional[str]:
        return self.properties.get("formKey")


class EndEvent(BPMNElement):
    """End Event (process termination point)."""


class UserTask(BPMNElement):
    """User Task (work performed by a person)."""

    @property
    def assignee(self) -> Optional[str]:
        return self.properties.get("assignee")

    @property
    def candidate_users(self) -> Optional[str]:
        return self.properties.get("candidateUsers")

    @property
    def candidate_groups(self) -> Optional[str]:
        return self.properties.get("candidateGroups")

    @property
    def due_date(self) -> Optional[str]:
        return self.properties.get("dueDate")

    @property
    def form_key(self) -> Optional[str]:
        return self.properties.get("formKey")

    @property
    def form_fields(self) -> List[Dict[str, Any]]:
        return self.properties.get("formFields") or []


class ServiceTask(BPMNElement):
    """Service Task (automated invocation)."""

    @property
    def implementation(self) -> Optional[str]:
        return self.properties.get("implementation")

    @property
    def java_class(self) -> Optional[str]:
        return self.properties.get("javaClass")

    @property
    def topic(self) -> Optional[str]:
        return self.properties.get("topic")

    @property
    def is_external(self) -> bool:
        return self.implementation == "external"

    @property
    def has_implementation(self) -> bool:
        """Whether any of implementation, javaClass or topic is set."""
        return bool(self.implementation or self.java_class or self.topic)


class ScriptTask(BPMNElement):
    """Script Task (inline script execution)."""

    @property
    def script_format(self) -> Optional[str]:
        return self.properties.get("scriptFormat")

    @property
    def script(self) -> Optional[str]:
        return self.properties.get("script")


class ExclusiveGateway(BPMNElement):
    """Exclusive Gateway (XOR - single path selection)."""

    @property
    def default_flow(self) -> Optional[str]:
        return self.properties.get("default")


class SequenceFlow(BaseModel):
    """Sequence Flow (control flow between elements)."""

    id: str = Field(..., description="Unique flow ID (shared namespace with elements)")
    type: str = Field(default=BPMNElementType.SEQUENCE_FLOW.value)
    name: Optional[str] = Field(None, description="Flow label")
    source_ref: str = Field(..., description="Source element ID")
    target_ref: str = Field(..., description="Target element ID")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Flow attributes")

    @property
    def condition_expression(self) -> Optional[str]:
        """Guard condition, if any."""
        return self.properties.get("conditionExpression")


__all__ = [
    "BPMNElementType",
    "ListenerType",
    "type_tag",
    "local_type_name",
    "Position",
    "Size",
    "ExecutionListener",
    "Parameter",
    "BPMNElement",
    "StartEvent",
    "EndEvent",
    "UserTask",
    "ServiceTask",
    "ScriptTask",
    "ExclusiveGateway",
    "SequenceFlow",
]
