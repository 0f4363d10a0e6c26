"""
Core infrastructure module for the BPMN modeler.

Provides configuration, ID generation, exceptions, and observability.
"""

from .config import ModelerConfig
from .exceptions import BPMNModelerError, IdGenerationError, XMLParseError
from .ids import IdGenerator, generate_unique_id, random_suffix
from .observability import (
    LogLevel,
    ObservabilityConfig,
    ObservabilityManager,
    Timer,
    record_metric,
    span,
)

__all__ = [
    # Configuration
    "ModelerConfig",
    # Errors
    "BPMNModelerError",
    "IdGenerationError",
    "XMLParseError",
    # IDs
    "IdGenerator",
    "generate_unique_id",
    "random_suffix",
    # Observability
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "Timer",
    "record_metric",
    "span",
]
