"""
BPMN Modeler: process document core

An in-memory BPMN 2.0 process graph with rule-based validation and a
bidirectional codec to BPMN 2.0 XML with Camunda extension attributes.
"""

# Core components
from bpmn_modeler.core import ModelerConfig, XMLParseError

# Models
from bpmn_modeler.models import (
    BPMNElement,
    BPMNElementType,
    BPMNProcess,
    ExecutionListener,
    ListenerType,
    Parameter,
    SequenceFlow,
    get_element_template,
    get_vendor_attributes,
)

# Serialization
from bpmn_modeler.serialization import XMLSerializer

# Validation
from bpmn_modeler.tools import Diagnostic, Severity, has_errors, validate_process

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "ModelerConfig",
    "XMLParseError",
    # Models
    "BPMNElement",
    "BPMNElementType",
    "BPMNProcess",
    "ExecutionListener",
    "ListenerType",
    "Parameter",
    "SequenceFlow",
    "get_element_template",
    "get_vendor_attributes",
    # Serialization
    "XMLSerializer",
    # Validation
    "Diagnostic",
    "Severity",
    "has_errors",
    "validate_process",
]
