"""
BPMN 2.0 XML Parsing

Reads BPMN 2.0 interchange XML (with Camunda extensions) back into a
BPMNProcess: process attributes, flow nodes, Camunda attributes, execution
listeners, input/output mappings, sequence flows and shape bounds.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from lxml import etree

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.exceptions import XMLParseError
from bpmn_modeler.core.ids import IdGenerator
from bpmn_modeler.core.observability import Timer
from bpmn_modeler.models.bpmn_elements import (
    BPMNElement,
    ExecutionListener,
    ListenerType,
    Parameter,
    Position,
    Size,
)
from bpmn_modeler.models.element_templates import BOOLEAN_VENDOR_ATTRIBUTES
from bpmn_modeler.models.process import BPMNProcess
from bpmn_modeler.serialization.xml_generation import (
    BPMN_NAMESPACE,
    BPMNDI_NAMESPACE,
    CAMUNDA_NAMESPACE,
    DC_NAMESPACE,
    LISTENER_ATTRIBUTES,
    MODELER_NAMESPACE,
    qname,
    type_tag_for,
)

logger = logging.getLogger(__name__)

# Process children that are not flow nodes
NON_ELEMENT_TAGS = frozenset(
    {"sequenceFlow", "documentation", "extensionElements", "laneSet", "incoming", "outgoing"}
)


def parse_document(xml: Union[str, bytes]) -> etree._Element:
    """Parse XML into an element tree root.

    Raises:
        XMLParseError: If the document is not well-formed
    """
    if isinstance(xml, str):
        xml = xml.encode("utf-8")

    parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_blank_text=True)
    try:
        return etree.fromstring(xml, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise XMLParseError(f"Invalid XML: {e}") from e


class BPMNXMLParser:
    """Builds a BPMNProcess from BPMN 2.0 XML."""

    def __init__(self, config: Optional[ModelerConfig] = None):
        """Initialize XML parser.

        Args:
            config: Defaults for attributes missing from the document
        """
        self.config = config or ModelerConfig()

    def parse(
        self, xml: Union[str, bytes], id_generator: Optional[IdGenerator] = None
    ) -> BPMNProcess:
        """Parse a BPMN document into a new process.

        Args:
            xml: Document text
            id_generator: ID suffix generator for the new process

        Returns:
            Process holding the document's elements and flows

        Raises:
            XMLParseError: If the XML is malformed or contains no process
        """
        with Timer("xml_parsing"):
            root = parse_document(xml)
            process_elem = self._find_process(root)

            process = BPMNProcess(
                process_elem.get("id"), id_generator=id_generator, config=self.config
            )
            for element in process.get_elements():
                process.remove_element(element.id)

            process.name = process_elem.get("name") or self.config.imported_process_name
            process.is_executable = process_elem.get("isExecutable") == "true"
            process.version_tag = process_elem.get(
                qname(CAMUNDA_NAMESPACE, "versionTag"), process.version_tag
            )
            process.history_time_to_live = process_elem.get(
                qname(CAMUNDA_NAMESPACE, "historyTimeToLive"), process.history_time_to_live
            )

            flow_elems = []
            for child in process_elem:
                if not isinstance(child.tag, str):
                    continue
                tag = etree.QName(child)
                if tag.namespace != BPMN_NAMESPACE:
                    continue
                if tag.localname == "sequenceFlow":
                    flow_elems.append(child)
                elif tag.localname not in NON_ELEMENT_TAGS:
                    self._parse_flow_node(process, child, tag.localname)

            for flow_elem in flow_elems:
                self._parse_sequence_flow(process, flow_elem)

            self._parse_diagram(process, root)

        logger.debug(
            f"Parsed process {process.id}: {len(process.get_elements())} elements, "
            f"{len(process.get_sequence_flows())} flows"
        )
        return process

    def _find_process(self, root: etree._Element) -> etree._Element:
        process_tag = qname(BPMN_NAMESPACE, "process")
        if root.tag == process_tag:
            return root
        process_elem = root.find(process_tag)
        if process_elem is None:
            raise XMLParseError("Invalid XML: no bpmn:process element found")
        return process_elem

    def _parse_flow_node(self, process: BPMNProcess, elem: etree._Element, local_name: str) -> None:
        """Create an element from a flow node tag."""
        documentation = elem.findtext(qname(BPMN_NAMESPACE, "documentation"))
        listeners: List[ExecutionListener] = []
        inputs: List[Parameter] = []
        outputs: List[Parameter] = []

        extensions = elem.find(qname(BPMN_NAMESPACE, "extensionElements"))
        if extensions is not None:
            for listener_elem in extensions.iterfind(qname(CAMUNDA_NAMESPACE, "executionListener")):
                listener = self._parse_listener(listener_elem)
                if listener is not None:
                    listeners.append(listener)

            io_elem = extensions.find(qname(CAMUNDA_NAMESPACE, "inputOutput"))
            if io_elem is not None:
                inputs = self._parse_parameters(io_elem, "inputParameter")
                outputs = self._parse_parameters(io_elem, "outputParameter")

        process.add_element(
            elem.get(qname(MODELER_NAMESPACE, "elementType")) or type_tag_for(local_name),
            id=elem.get("id"),
            name=elem.get("name"),
            documentation=documentation,
            properties=self._parse_vendor_attributes(elem),
            execution_listeners=listeners,
            input_parameters=inputs,
            output_parameters=outputs,
        )

    def _parse_vendor_attributes(self, elem: etree._Element) -> Dict[str, Any]:
        """Collect camunda:* attributes into a properties mapping."""
        properties: Dict[str, Any] = {}
        for attr_name, value in elem.attrib.items():
            attr = etree.QName(attr_name)
            if attr.namespace != CAMUNDA_NAMESPACE:
                continue
            name = attr.localname
            if name == "class":
                properties["javaClass"] = value
            elif name == "type" and value == "external":
                properties["implementation"] = "external"
            elif name in BOOLEAN_VENDOR_ATTRIBUTES:
                properties[name] = value == "true"
            else:
                properties[name] = value
        return properties

    def _parse_listener(self, elem: etree._Element) -> Optional[ExecutionListener]:
        event = elem.get("event", "")
        script_elem = elem.find(qname(CAMUNDA_NAMESPACE, "script"))
        if script_elem is not None:
            return ExecutionListener(
                event=event,
                listener_type=ListenerType.SCRIPT,
                script=script_elem.text or "",
                script_format=script_elem.get("scriptFormat"),
            )

        for listener_type, attribute in LISTENER_ATTRIBUTES.items():
            value = elem.get(attribute)
            if value is not None:
                return ExecutionListener.model_validate(
                    {"event": event, "listenerType": listener_type, attribute: value}
                )

        logger.warning(f"Skipping execution listener without implementation (event={event})")
        return None

    def _parse_parameters(self, io_elem: etree._Element, tag: str) -> List[Parameter]:
        return [
            Parameter(name=param.get("name", ""), value=param.text or "")
            for param in io_elem.iterfind(qname(CAMUNDA_NAMESPACE, tag))
        ]

    def _parse_sequence_flow(self, process: BPMNProcess, elem: etree._Element) -> None:
        condition = elem.findtext(qname(BPMN_NAMESPACE, "conditionExpression"))
        process.add_sequence_flow(
            elem.get("sourceRef", ""),
            elem.get("targetRef", ""),
            id=elem.get("id"),
            name=elem.get("name"),
            condition_expression=condition.strip() if condition else None,
        )

    def _parse_diagram(self, process: BPMNProcess, root: etree._Element) -> None:
        """Restore element geometry from BPMNShape bounds."""
        for shape in root.iter(qname(BPMNDI_NAMESPACE, "BPMNShape")):
            element = process.get_element_by_id(shape.get("bpmnElement", ""))
            bounds = shape.find(qname(DC_NAMESPACE, "Bounds"))
            if not isinstance(element, BPMNElement) or bounds is None:
                continue
            try:
                element.position = Position(x=float(bounds.get("x")), y=float(bounds.get("y")))
                element.size = Size(
                    width=float(bounds.get("width")), height=float(bounds.get("height"))
                )
            except (TypeError, ValueError) as e:
                raise XMLParseError(f"Invalid bounds for shape {shape.get('id')}: {e}") from e


__all__ = ["BPMNXMLParser", "parse_document", "type_tag_for"]
