"""
Process Graph

The editable aggregate root: one process with its elements and sequence
flows, kept in insertion order. All IDs (elements and flows) share a single
namespace and are unique within the process.

Mutation, lookup, validation, XML export/import and cloning all go through
``BPMNProcess``. Instances are not thread-safe; one owner edits a process at
a time.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.ids import IdGenerator, generate_unique_id, random_suffix
from bpmn_modeler.models.bpmn_elements import (
    BPMNElement,
    BPMNElementType,
    ExecutionListener,
    Parameter,
    SequenceFlow,
    local_type_name,
    type_tag,
)
from bpmn_modeler.models.element_templates import element_class_for, get_element_template
from bpmn_modeler.tools.validation import Diagnostic, validate_process

logger = logging.getLogger(__name__)

# Keyword arguments copied into ``properties`` under their camelCase name
CONVENIENCE_FIELDS: Dict[str, str] = {
    "assignee": "assignee",
    "candidateUsers": "candidateUsers",
    "candidate_users": "candidateUsers",
    "candidateGroups": "candidateGroups",
    "candidate_groups": "candidateGroups",
    "dueDate": "dueDate",
    "due_date": "dueDate",
    "followUpDate": "followUpDate",
    "follow_up_date": "followUpDate",
    "priority": "priority",
    "formKey": "formKey",
    "form_key": "formKey",
    "formFields": "formFields",
    "form_fields": "formFields",
    "implementation": "implementation",
    "javaClass": "javaClass",
    "java_class": "javaClass",
    "topic": "topic",
    "taskPriority": "taskPriority",
    "task_priority": "taskPriority",
}

STRUCTURAL_FIELDS = (
    "name",
    "documentation",
    "position",
    "size",
    "execution_listeners",
    "input_parameters",
    "output_parameters",
)

GraphItem = Union[BPMNElement, SequenceFlow]


class _IdScope:
    """ID namespace spanning several processes."""

    def __init__(self, *processes: "BPMNProcess"):
        self._processes = processes

    def __contains__(self, candidate: object) -> bool:
        return any(candidate in process for process in self._processes)


class BPMNProcess:
    """A BPMN process: elements plus the sequence flows connecting them."""

    def __init__(
        self,
        process_id: Optional[str] = None,
        *,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[ModelerConfig] = None,
    ):
        """Create a process containing a single start event.

        Args:
            process_id: Explicit process ID (``Process_{suffix}`` if omitted)
            id_generator: Callable returning ID suffixes (random by default)
            config: Process defaults and export metadata
        """
        self.config = config or ModelerConfig()
        self._id_generator = id_generator or random_suffix
        self._elements: Dict[str, BPMNElement] = {}
        self._flows: Dict[str, SequenceFlow] = {}

        self.id = process_id or f"Process_{self._id_generator()}"
        self.name = self.config.default_process_name
        self.is_executable = True
        self.version_tag = self.config.version_tag
        self.history_time_to_live = self.config.history_time_to_live

        self.add_element(BPMNElementType.START_EVENT)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._elements or item_id in self._flows

    def __repr__(self) -> str:
        return (
            f"BPMNProcess(id={self.id!r}, name={self.name!r}, "
            f"elements={len(self._elements)}, flows={len(self._flows)})"
        )

    # ID generation

    def _generate_id(self, prefix: str, scope: Optional[_IdScope] = None) -> str:
        return generate_unique_id(prefix, scope or self, self._id_generator)

    # Elements

    def add_element(self, element_type: Any, **overrides: Any) -> BPMNElement:
        """Add an element built from the type's template plus ``overrides``.

        Recognized keys: ``id``, ``properties``, the structural fields
        (``name``, ``documentation``, ``position``, ``size``,
        ``execution_listeners``, ``input_parameters``, ``output_parameters``)
        and the convenience fields in ``CONVENIENCE_FIELDS``. Any other key is
        stored in ``properties`` as given.

        Returns:
            The stored element (owned by this process)
        """
        tag = type_tag(element_type)
        overrides = copy.deepcopy(overrides)

        element_id = overrides.pop("id", None)
        if element_id is None:
            element_id = self._generate_id(local_type_name(tag))
        elif element_id in self:
            replacement = self._generate_id(local_type_name(tag))
            logger.warning(f"ID '{element_id}' already in use, assigned '{replacement}' instead")
            element_id = replacement

        template = get_element_template(tag)
        properties = template.properties
        properties.update(overrides.pop("properties", None) or {})

        fields: Dict[str, Any] = {}
        for key in STRUCTURAL_FIELDS:
            value = overrides.pop(key, None)
            if value is not None:
                fields[key] = value
        fields.setdefault("size", template.size)

        for key, value in overrides.items():
            if value is not None:
                properties[CONVENIENCE_FIELDS.get(key, key)] = value

        element = element_class_for(tag)(id=element_id, type=tag, properties=properties, **fields)
        self._elements[element_id] = element
        logger.debug(f"Added element {element_id} ({tag})")
        return element

    def remove_element(self, element_id: str) -> None:
        """Remove an element and every flow that starts or ends at it.

        The removed flows are also pruned from the ``incoming``/``outgoing``
        lists of their other endpoint.
        """
        self._elements.pop(element_id, None)

        incident = [
            flow
            for flow in self._flows.values()
            if flow.source_ref == element_id or flow.target_ref == element_id
        ]
        for flow in incident:
            del self._flows[flow.id]
            self._detach_flow(flow)

        logger.debug(f"Removed element {element_id} and {len(incident)} incident flow(s)")

    def update_element(
        self, element_id: str, updates: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> None:
        """Apply ``name`` directly and merge every other key into ``properties``.

        Unknown IDs are ignored.
        """
        element = self._elements.get(element_id)
        if element is None:
            return

        changes = {**(updates or {}), **kwargs}
        if "name" in changes:
            element.name = changes.pop("name")
        for key, value in changes.items():
            element.properties[CONVENIENCE_FIELDS.get(key, key)] = copy.deepcopy(value)

    def get_element_by_id(self, element_id: str) -> Optional[GraphItem]:
        """Look up an element, then a flow; ``None`` if neither exists."""
        if element_id in self._elements:
            return self._elements[element_id]
        return self._flows.get(element_id)

    def get_elements(self) -> List[BPMNElement]:
        """All elements in insertion order."""
        return list(self._elements.values())

    def has_element(self, element_id: str) -> bool:
        return element_id in self._elements

    # Sequence flows

    def add_sequence_flow(self, source_id: str, target_id: str, **overrides: Any) -> SequenceFlow:
        """Connect two elements.

        The flow is stored even if an endpoint does not exist; in that case
        the missing side simply gets no ``incoming``/``outgoing`` entry.
        """
        flow_id = overrides.get("id")
        if flow_id is None or flow_id in self:
            if flow_id is not None:
                logger.warning(f"ID '{flow_id}' already in use, generating a new flow ID")
            flow_id = self._generate_id("Flow")

        properties = copy.deepcopy(overrides.get("properties") or {})
        condition = overrides.get("condition_expression", overrides.get("conditionExpression"))
        if condition is not None:
            properties["conditionExpression"] = condition

        flow = SequenceFlow(
            id=flow_id,
            name=overrides.get("name"),
            source_ref=source_id,
            target_ref=target_id,
            properties=properties,
        )

        source = self._elements.get(source_id)
        target = self._elements.get(target_id)
        if source is not None:
            source.outgoing.append(flow_id)
        if target is not None:
            target.incoming.append(flow_id)
        if source is None or target is None:
            logger.warning(
                f"Sequence flow {flow_id} references missing element(s): "
                f"source={source_id} target={target_id}"
            )

        self._flows[flow_id] = flow
        return flow

    def get_sequence_flows(self) -> List[SequenceFlow]:
        """All sequence flows in insertion order."""
        return list(self._flows.values())

    def get_flow(self, flow_id: str) -> Optional[SequenceFlow]:
        return self._flows.get(flow_id)

    def _detach_flow(self, flow: SequenceFlow) -> None:
        source = self._elements.get(flow.source_ref)
        if source is not None and flow.id in source.outgoing:
            source.outgoing.remove(flow.id)
        target = self._elements.get(flow.target_ref)
        if target is not None and flow.id in target.incoming:
            target.incoming.remove(flow.id)

    # Listeners and I/O mappings

    def add_execution_listener(
        self, element_id: str, listener: Union[ExecutionListener, Dict[str, Any]]
    ) -> None:
        """Append an execution listener; no-op for unknown elements."""
        element = self._elements.get(element_id)
        if element is None:
            return
        if isinstance(listener, ExecutionListener):
            listener = listener.model_copy(deep=True)
        else:
            listener = ExecutionListener.model_validate(listener)
        element.execution_listeners.append(listener)

    def add_input_parameter(
        self, element_id: str, name: str, value: str, param_type: Optional[str] = None
    ) -> None:
        """Append an input parameter; no-op for unknown elements."""
        element = self._elements.get(element_id)
        if element is not None:
            element.input_parameters.append(Parameter(name=name, value=value, type=param_type))

    def add_output_parameter(
        self, element_id: str, name: str, value: str, param_type: Optional[str] = None
    ) -> None:
        """Append an output parameter; no-op for unknown elements."""
        element = self._elements.get(element_id)
        if element is not None:
            element.output_parameters.append(Parameter(name=name, value=value, type=param_type))

    # Validation and serialization

    def validate(self) -> List[Diagnostic]:
        """Run the validation rules over the current state."""
        return validate_process(self)

    def to_xml(self) -> str:
        """Serialize to BPMN 2.0 XML with Camunda extensions."""
        from bpmn_modeler.serialization import XMLSerializer

        return XMLSerializer(self.config).serialize(self)

    @classmethod
    def from_xml(
        cls,
        xml: Union[str, bytes],
        *,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[ModelerConfig] = None,
    ) -> "BPMNProcess":
        """Parse BPMN 2.0 XML into a new process.

        Raises:
            XMLParseError: If the XML is malformed or has no process
        """
        from bpmn_modeler.serialization import XMLSerializer

        return XMLSerializer(config).deserialize(xml, id_generator=id_generator)

    # Cloning

    def clone(self) -> "BPMNProcess":
        """Deep copy with fresh IDs for the process, its elements and flows."""
        cloned = BPMNProcess(id_generator=self._id_generator, config=self.config)
        cloned.name = self.name
        cloned.is_executable = self.is_executable
        cloned.version_tag = self.version_tag
        cloned.history_time_to_live = self.history_time_to_live
        cloned._elements.clear()

        scope = _IdScope(cloned, self)
        element_ids: Dict[str, str] = {}
        for element in self._elements.values():
            new_element = element.model_copy(deep=True)
            new_element.id = cloned._generate_id(element.local_type, scope)
            element_ids[element.id] = new_element.id
            cloned._elements[new_element.id] = new_element

        flow_ids: Dict[str, str] = {}
        for flow in self._flows.values():
            new_flow = flow.model_copy(deep=True)
            new_flow.id = cloned._generate_id("Flow", scope)
            new_flow.source_ref = element_ids.get(flow.source_ref, flow.source_ref)
            new_flow.target_ref = element_ids.get(flow.target_ref, flow.target_ref)
            flow_ids[flow.id] = new_flow.id
            cloned._flows[new_flow.id] = new_flow

        for element in cloned._elements.values():
            element.incoming = _remap(element.incoming, flow_ids)
            element.outgoing = _remap(element.outgoing, flow_ids)

        return cloned


def _remap(flow_refs: Iterable[str], id_map: Dict[str, str]) -> List[str]:
    return [id_map[ref] for ref in flow_refs if ref in id_map]


__all__ = ["BPMNProcess", "CONVENIENCE_FIELDS"]
