"""
Exception hierarchy for the BPMN modeler core.

Validation never raises; diagnostics are returned instead. Exceptions are
reserved for input the codec cannot read and for a broken ID generator.
"""


class BPMNModelerError(Exception):
    """Base class for all modeler errors."""


class XMLParseError(BPMNModelerError, ValueError):
    """Raised when interchange XML cannot be parsed.

    The message carries the underlying parser error.
    """


class IdGenerationError(BPMNModelerError, RuntimeError):
    """Raised when no unique ID could be generated."""


__all__ = [
    "BPMNModelerError",
    "XMLParseError",
    "IdGenerationError",
]
