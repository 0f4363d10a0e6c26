"""
Element Template Registry

Stateless lookups from an element type tag to its default template
(geometry and baseline properties), to the Camunda vendor attributes that
are meaningful for that type, and to the model class used to hold it.
Unknown tags are accepted and get an empty template.
"""

import copy
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from bpmn_modeler.models.bpmn_elements import (
    BPMNElement,
    BPMNElementType,
    EndEvent,
    ExclusiveGateway,
    ScriptTask,
    ServiceTask,
    Size,
    StartEvent,
    UserTask,
    type_tag,
)


class ElementTemplate(BaseModel):
    """Default values applied when an element of a given type is created."""

    type: str = Field(..., description="Element type tag")
    size: Optional[Size] = Field(None, description="Default diagram size")
    properties: Dict[str, Any] = Field(default_factory=dict, description="Baseline properties")


_TASK_SIZE = {"width": 100, "height": 80}
_EVENT_SIZE = {"width": 36, "height": 36}
_GATEWAY_SIZE = {"width": 50, "height": 50}

_JOB_DEFAULTS = {"asyncBefore": False, "asyncAfter": False, "exclusive": True}

_TEMPLATES: Dict[str, Dict[str, Any]] = {
    BPMNElementType.USER_TASK.value: {"size": _TASK_SIZE, "properties": _JOB_DEFAULTS},
    BPMNElementType.SERVICE_TASK.value: {"size": _TASK_SIZE, "properties": _JOB_DEFAULTS},
    BPMNElementType.START_EVENT.value: {"size": _EVENT_SIZE},
    BPMNElementType.END_EVENT.value: {"size": _EVENT_SIZE},
    BPMNElementType.EXCLUSIVE_GATEWAY.value: {"size": _GATEWAY_SIZE},
    BPMNElementType.PARALLEL_GATEWAY.value: {"size": _GATEWAY_SIZE},
}

COMMON_VENDOR_ATTRIBUTES = [
    "asyncBefore",
    "asyncAfter",
    "exclusive",
    "jobRetryTimeCycle",
    "jobPriority",
]

_VENDOR_ATTRIBUTES: Dict[str, List[str]] = {
    BPMNElementType.USER_TASK.value: [
        "assignee",
        "candidateUsers",
        "candidateGroups",
        "dueDate",
        "followUpDate",
        "priority",
        "formKey",
    ],
    BPMNElementType.SERVICE_TASK.value: [
        "class",
        "delegateExpression",
        "expression",
        "resultVariable",
        "topic",
        "taskPriority",
    ],
    BPMNElementType.SCRIPT_TASK.value: [
        "scriptFormat",
        "script",
        "resultVariable",
        "resource",
    ],
}

# Vendor attributes whose XML text is "true"/"false"
BOOLEAN_VENDOR_ATTRIBUTES = frozenset({"asyncBefore", "asyncAfter", "exclusive"})

_ELEMENT_CLASSES: Dict[str, Type[BPMNElement]] = {
    BPMNElementType.START_EVENT.value: StartEvent,
    BPMNElementType.END_EVENT.value: EndEvent,
    BPMNElementType.USER_TASK.value: UserTask,
    BPMNElementType.SERVICE_TASK.value: ServiceTask,
    BPMNElementType.SCRIPT_TASK.value: ScriptTask,
    BPMNElementType.EXCLUSIVE_GATEWAY.value: ExclusiveGateway,
}


def get_element_template(element_type: Any) -> ElementTemplate:
    """Return the default template for a type tag.

    Every call returns a new template, so callers may mutate the result.
    """
    tag = type_tag(element_type)
    defaults = _TEMPLATES.get(tag, {})
    return ElementTemplate(
        type=tag,
        size=Size(**defaults["size"]) if "size" in defaults else None,
        properties=copy.deepcopy(defaults.get("properties", {})),
    )


def get_vendor_attributes(element_type: Any) -> List[str]:
    """Return the ordered Camunda attribute names meaningful for a type tag."""
    return COMMON_VENDOR_ATTRIBUTES + _VENDOR_ATTRIBUTES.get(type_tag(element_type), [])


def get_element_types() -> List[str]:
    """Return the catalogue of element types offered to modeling tools."""
    return [
        member.value
        for member in BPMNElementType
        if member is not BPMNElementType.SEQUENCE_FLOW
    ]


def element_class_for(element_type: Any) -> Type[BPMNElement]:
    """Return the model class for a type tag (``BPMNElement`` if unknown)."""
    return _ELEMENT_CLASSES.get(type_tag(element_type), BPMNElement)


__all__ = [
    "ElementTemplate",
    "COMMON_VENDOR_ATTRIBUTES",
    "BOOLEAN_VENDOR_ATTRIBUTES",
    "get_element_template",
    "get_vendor_attributes",
    "get_element_types",
    "element_class_for",
]
