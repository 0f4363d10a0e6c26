"""
XML codec for BPMN 2.0 interchange documents with Camunda extensions.
"""

from .serializer import XMLSerializer
from .xml_generation import (
    BPMN_NAMESPACE,
    BPMNDI_NAMESPACE,
    CAMUNDA_NAMESPACE,
    DC_NAMESPACE,
    DI_NAMESPACE,
    MODELER_NAMESPACE,
    XSI_NAMESPACE,
    BPMNXMLGenerator,
)
from .xml_parsing import BPMNXMLParser, parse_document

__all__ = [
    "XMLSerializer",
    "BPMNXMLGenerator",
    "BPMNXMLParser",
    "parse_document",
    "BPMN_NAMESPACE",
    "BPMNDI_NAMESPACE",
    "CAMUNDA_NAMESPACE",
    "DC_NAMESPACE",
    "DI_NAMESPACE",
    "MODELER_NAMESPACE",
    "XSI_NAMESPACE",
]
