"""
BPMN 2.0 XML Generation

Serializes a BPMNProcess to BPMN 2.0 interchange XML with Camunda vendor
extensions and BPMN Diagram Interchange (DI) shapes.

Supports:
- Camunda attributes from the element template allow-list
- Execution listeners and input/output mappings as extension elements
- Sequence flows with condition expressions
- Default bounds for elements without explicit geometry
- Type tags outside the BPMN schema, kept in ``modeler:elementType``
"""

import logging
import re
from typing import TYPE_CHECKING, Any, List, Optional

from lxml import etree

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.observability import Timer
from bpmn_modeler.models.bpmn_elements import (
    BPMNElement,
    ExecutionListener,
    ListenerType,
    Parameter,
    SequenceFlow,
    local_type_name,
)
from bpmn_modeler.models.element_templates import get_vendor_attributes

if TYPE_CHECKING:
    from bpmn_modeler.models.process import BPMNProcess

logger = logging.getLogger(__name__)

# Namespaces
BPMN_NAMESPACE = "http://www.omg.org/spec/BPMN/20100524/MODEL"
BPMNDI_NAMESPACE = "http://www.omg.org/spec/BPMN/20100524/DI"
DC_NAMESPACE = "http://www.omg.org/spec/DD/20100524/DC"
DI_NAMESPACE = "http://www.omg.org/spec/DD/20100524/DI"
CAMUNDA_NAMESPACE = "http://camunda.org/schema/1.0/bpmn"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
MODELER_NAMESPACE = "http://camunda.org/schema/modeler/1.0"

NSMAP = {
    "bpmn": BPMN_NAMESPACE,
    "bpmndi": BPMNDI_NAMESPACE,
    "dc": DC_NAMESPACE,
    "di": DI_NAMESPACE,
    "camunda": CAMUNDA_NAMESPACE,
    "xsi": XSI_NAMESPACE,
    "modeler": MODELER_NAMESPACE,
}

TARGET_NAMESPACE = "http://bpmn.io/schema/bpmn"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Default bounds
DEFAULT_X = 100
DEFAULT_Y = 100
DEFAULT_EVENT_WIDTH = 36
DEFAULT_EVENT_HEIGHT = 36
DEFAULT_TASK_WIDTH = 100
DEFAULT_TASK_HEIGHT = 80

# Written for every element type, ahead of the per-type allow-list
CORE_VENDOR_ATTRIBUTES = ["assignee", "candidateUsers", "candidateGroups", "dueDate", "formKey"]

# Emitted from other properties, see _set_vendor_attributes
DERIVED_VENDOR_ATTRIBUTES = {"class", "type", "topic"}

LISTENER_ATTRIBUTES = {
    ListenerType.CLASS: "class",
    ListenerType.EXPRESSION: "expression",
    ListenerType.DELEGATE_EXPRESSION: "delegateExpression",
}


# Characters outside the XML 1.0 Char production
_ILLEGAL_XML_CHARS = re.compile(r"[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def qname(namespace: str, local_name: str) -> str:
    """Clark notation: ``{namespace}local``."""
    return "{%s}%s" % (namespace, local_name)


def schema_tag_name(element_type: str) -> str:
    """Map a type tag to its BPMN schema tag: ``bpmn:UserTask`` -> ``userTask``.

    Characters that cannot appear in an XML name are replaced with ``_``.
    """
    local = _INVALID_NAME_CHARS.sub("_", local_type_name(element_type))
    if not local or not (local[0].isalpha() or local[0] == "_"):
        local = "_" + local
    return local[:1].lower() + local[1:]


def type_tag_for(local_name: str) -> str:
    """Map a schema tag name back to a type tag: ``userTask`` -> ``bpmn:UserTask``."""
    return "bpmn:" + local_name[:1].upper() + local_name[1:]


def is_schema_type(element_type: str) -> bool:
    """Whether a type tag survives the schema tag mapping unchanged."""
    return type_tag_for(schema_tag_name(element_type)) == element_type


def format_value(value: Any) -> str:
    """Render an attribute or text value.

    Booleans become true/false, integral numbers lose their '.0', and
    characters not allowed in XML 1.0 are dropped.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _ILLEGAL_XML_CHARS.sub("", str(value))


class BPMNXMLGenerator:
    """Generates BPMN 2.0 XML from a BPMNProcess."""

    def __init__(self, config: Optional[ModelerConfig] = None):
        """Initialize XML generator.

        Args:
            config: Exporter metadata written to the definitions element
        """
        self.config = config or ModelerConfig()

    def generate_xml(self, process: "BPMNProcess") -> str:
        """Generate BPMN 2.0 XML for a process.

        Args:
            process: Process to serialize (not modified)

        Returns:
            XML document string with declaration
        """
        with Timer("xml_generation"):
            root = self._build_xml_root(process)
            body = etree.tostring(root, pretty_print=True, encoding="unicode")

        logger.debug(
            f"Serialized process {process.id}: {len(process.get_elements())} elements, "
            f"{len(process.get_sequence_flows())} flows"
        )
        return XML_DECLARATION + body

    def _build_xml_root(self, process: "BPMNProcess") -> etree._Element:
        """Build the definitions element with process and diagram."""
        root = etree.Element(qname(BPMN_NAMESPACE, "definitions"), nsmap=NSMAP)
        root.set("id", format_value(f"Definitions_{process.id}"))
        root.set("targetNamespace", TARGET_NAMESPACE)
        root.set("exporter", format_value(self.config.exporter))
        root.set("exporterVersion", format_value(self.config.exporter_version))
        root.set(
            qname(MODELER_NAMESPACE, "executionPlatform"),
            format_value(self.config.execution_platform),
        )
        root.set(
            qname(MODELER_NAMESPACE, "executionPlatformVersion"),
            format_value(self.config.execution_platform_version),
        )

        root.append(self._build_process_element(process))
        root.append(self._build_diagram_element(process))
        return root

    def _build_process_element(self, process: "BPMNProcess") -> etree._Element:
        """Build process XML element."""
        process_elem = etree.Element(qname(BPMN_NAMESPACE, "process"))
        process_elem.set("id", format_value(process.id))
        if process.name:
            process_elem.set("name", format_value(process.name))
        process_elem.set("isExecutable", format_value(process.is_executable))
        if process.version_tag:
            process_elem.set(
                qname(CAMUNDA_NAMESPACE, "versionTag"), format_value(process.version_tag)
            )
        if process.history_time_to_live:
            process_elem.set(
                qname(CAMUNDA_NAMESPACE, "historyTimeToLive"),
                format_value(process.history_time_to_live),
            )

        for element in process.get_elements():
            process_elem.append(self._build_flow_node_element(element))

        for flow in process.get_sequence_flows():
            process_elem.append(self._build_sequence_flow_element(flow))

        return process_elem

    def _build_flow_node_element(self, element: BPMNElement) -> etree._Element:
        """Build XML element for a flow node."""
        elem = etree.Element(qname(BPMN_NAMESPACE, schema_tag_name(element.type)))
        elem.set("id", format_value(element.id))
        if element.name:
            elem.set("name", format_value(element.name))
        if not is_schema_type(element.type):
            elem.set(qname(MODELER_NAMESPACE, "elementType"), format_value(element.type))

        self._set_vendor_attributes(elem, element)

        if element.documentation:
            doc_elem = etree.SubElement(elem, qname(BPMN_NAMESPACE, "documentation"))
            doc_elem.text = format_value(element.documentation)

        extensions = self._build_extension_elements(element)
        if extensions is not None:
            elem.append(extensions)

        for incoming_id in element.incoming:
            incoming_elem = etree.SubElement(elem, qname(BPMN_NAMESPACE, "incoming"))
            incoming_elem.text = format_value(incoming_id)
        for outgoing_id in element.outgoing:
            outgoing_elem = etree.SubElement(elem, qname(BPMN_NAMESPACE, "outgoing"))
            outgoing_elem.text = format_value(outgoing_id)

        return elem

    def _set_vendor_attributes(self, elem: etree._Element, element: BPMNElement) -> None:
        """Write allow-listed Camunda attributes present in the element's properties."""
        properties = element.properties
        names = CORE_VENDOR_ATTRIBUTES + [
            name
            for name in get_vendor_attributes(element.type)
            if name not in CORE_VENDOR_ATTRIBUTES and name not in DERIVED_VENDOR_ATTRIBUTES
        ]

        for name in names:
            value = properties.get(name)
            if value is not None and value != "":
                elem.set(qname(CAMUNDA_NAMESPACE, name), format_value(value))

        if properties.get("javaClass"):
            elem.set(qname(CAMUNDA_NAMESPACE, "class"), format_value(properties["javaClass"]))

        if properties.get("implementation") == "external":
            elem.set(qname(CAMUNDA_NAMESPACE, "type"), "external")
            if properties.get("topic"):
                elem.set(qname(CAMUNDA_NAMESPACE, "topic"), format_value(properties["topic"]))

    def _build_extension_elements(self, element: BPMNElement) -> Optional[etree._Element]:
        """Build extensionElements for listeners and I/O mappings (None if empty)."""
        if not (
            element.execution_listeners or element.input_parameters or element.output_parameters
        ):
            return None

        extensions = etree.Element(qname(BPMN_NAMESPACE, "extensionElements"))

        for listener in element.execution_listeners:
            extensions.append(self._build_listener_element(listener))

        if element.input_parameters or element.output_parameters:
            io_elem = etree.SubElement(extensions, qname(CAMUNDA_NAMESPACE, "inputOutput"))
            self._append_parameters(io_elem, "inputParameter", element.input_parameters)
            self._append_parameters(io_elem, "outputParameter", element.output_parameters)

        return extensions

    def _build_listener_element(self, listener: ExecutionListener) -> etree._Element:
        """Build camunda:executionListener element."""
        elem = etree.Element(qname(CAMUNDA_NAMESPACE, "executionListener"))
        elem.set("event", format_value(listener.event))

        if listener.listener_type == ListenerType.SCRIPT:
            script_elem = etree.SubElement(elem, qname(CAMUNDA_NAMESPACE, "script"))
            if listener.script_format:
                script_elem.set("scriptFormat", format_value(listener.script_format))
            script_elem.text = format_value(listener.script or "")
        elif listener.payload is not None:
            elem.set(LISTENER_ATTRIBUTES[listener.listener_type], format_value(listener.payload))

        return elem

    def _append_parameters(
        self, io_elem: etree._Element, tag: str, parameters: List[Parameter]
    ) -> None:
        for parameter in parameters:
            param_elem = etree.SubElement(io_elem, qname(CAMUNDA_NAMESPACE, tag))
            param_elem.set("name", format_value(parameter.name))
            param_elem.text = format_value(parameter.value)

    def _build_sequence_flow_element(self, flow: SequenceFlow) -> etree._Element:
        """Build XML element for a sequence flow."""
        elem = etree.Element(qname(BPMN_NAMESPACE, "sequenceFlow"))
        elem.set("id", format_value(flow.id))
        if flow.name:
            elem.set("name", format_value(flow.name))
        elem.set("sourceRef", format_value(flow.source_ref))
        elem.set("targetRef", format_value(flow.target_ref))

        if flow.condition_expression:
            cond_elem = etree.SubElement(elem, qname(BPMN_NAMESPACE, "conditionExpression"))
            cond_elem.set(qname(XSI_NAMESPACE, "type"), "bpmn:tFormalExpression")
            cond_elem.text = format_value(flow.condition_expression)

        return elem

    def _build_diagram_element(self, process: "BPMNProcess") -> etree._Element:
        """Build BPMN Diagram Interchange element.

        Only shapes are written; sequence flows get no BPMNEdge.
        """
        diagram = etree.Element(qname(BPMNDI_NAMESPACE, "BPMNDiagram"))
        diagram.set("id", "BPMNDiagram_1")

        plane = etree.SubElement(diagram, qname(BPMNDI_NAMESPACE, "BPMNPlane"))
        plane.set("id", "BPMNPlane_1")
        plane.set("bpmnElement", format_value(process.id))

        for element in process.get_elements():
            plane.append(self._build_shape_diagram(element))

        return diagram

    def _build_shape_diagram(self, element: BPMNElement) -> etree._Element:
        """Build BPMN shape diagram element."""
        shape = etree.Element(qname(BPMNDI_NAMESPACE, "BPMNShape"))
        shape.set("id", format_value(f"{element.id}_di"))
        shape.set("bpmnElement", format_value(element.id))

        is_event = "event" in element.type.lower()
        x = element.position.x if element.position else DEFAULT_X
        y = element.position.y if element.position else DEFAULT_Y
        if element.size:
            width, height = element.size.width, element.size.height
        elif is_event:
            width, height = DEFAULT_EVENT_WIDTH, DEFAULT_EVENT_HEIGHT
        else:
            width, height = DEFAULT_TASK_WIDTH, DEFAULT_TASK_HEIGHT

        bounds = etree.SubElement(shape, qname(DC_NAMESPACE, "Bounds"))
        bounds.set("x", format_value(x))
        bounds.set("y", format_value(y))
        bounds.set("width", format_value(width))
        bounds.set("height", format_value(height))

        return shape


__all__ = [
    "BPMN_NAMESPACE",
    "BPMNDI_NAMESPACE",
    "DC_NAMESPACE",
    "DI_NAMESPACE",
    "CAMUNDA_NAMESPACE",
    "XSI_NAMESPACE",
    "MODELER_NAMESPACE",
    "TARGET_NAMESPACE",
    "BPMNXMLGenerator",
    "qname",
    "schema_tag_name",
    "type_tag_for",
    "is_schema_type",
    "format_value",
]
