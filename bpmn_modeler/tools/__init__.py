"""
Tools for the BPMN modeler: process validation and the command-line interface.
"""

from .validation import (
    Diagnostic,
    ProcessValidator,
    Severity,
    has_errors,
    summarize,
    validate_process,
)

__all__ = [
    "Diagnostic",
    "ProcessValidator",
    "Severity",
    "has_errors",
    "summarize",
    "validate_process",
]
