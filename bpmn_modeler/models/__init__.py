"""
Process model: element types, templates, and the process graph.
"""

from .bpmn_elements import (
    BPMNElement,
    BPMNElementType,
    EndEvent,
    ExclusiveGateway,
    ExecutionListener,
    ListenerType,
    Parameter,
    Position,
    ScriptTask,
    SequenceFlow,
    ServiceTask,
    Size,
    StartEvent,
    UserTask,
)
from .element_templates import (
    ElementTemplate,
    element_class_for,
    get_element_template,
    get_element_types,
    get_vendor_attributes,
)
from .process import BPMNProcess

__all__ = [
    # Elements
    "BPMNElement",
    "BPMNElementType",
    "EndEvent",
    "ExclusiveGateway",
    "ExecutionListener",
    "ListenerType",
    "Parameter",
    "Position",
    "ScriptTask",
    "SequenceFlow",
    "ServiceTask",
    "Size",
    "StartEvent",
    "UserTask",
    # Templates
    "ElementTemplate",
    "element_class_for",
    "get_element_template",
    "get_element_types",
    "get_vendor_attributes",
    # Process
    "BPMNProcess",
]
