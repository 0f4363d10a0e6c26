"""
Modeler Configuration

Defaults for new processes and for the exporter metadata written into
interchange XML. Library code uses the dataclass defaults; the CLI loads
overrides from the environment.
"""

import os
from dataclasses import dataclass


@dataclass
class ModelerConfig:
    """Configuration for process defaults and XML export metadata."""

    # Process defaults
    default_process_name: str = "New Process"
    imported_process_name: str = "Imported Process"
    version_tag: str = "1.0.0"
    history_time_to_live: str = "P30D"

    # Exporter metadata
    exporter: str = "BPMN Modeler"
    exporter_version: str = "1.0.0"
    execution_platform: str = "Camunda Platform"
    execution_platform_version: str = "7.23.0"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ModelerConfig":
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            default_process_name=os.getenv(
                "BPMN_MODELER_DEFAULT_PROCESS_NAME", defaults.default_process_name
            ),
            imported_process_name=os.getenv(
                "BPMN_MODELER_IMPORTED_PROCESS_NAME", defaults.imported_process_name
            ),
            version_tag=os.getenv("BPMN_MODELER_VERSION_TAG", defaults.version_tag),
            history_time_to_live=os.getenv(
                "BPMN_MODELER_HISTORY_TIME_TO_LIVE", defaults.history_time_to_live
            ),
            exporter=os.getenv("BPMN_MODELER_EXPORTER", defaults.exporter),
            exporter_version=os.getenv(
                "BPMN_MODELER_EXPORTER_VERSION", defaults.exporter_version
            ),
            execution_platform=os.getenv(
                "BPMN_MODELER_EXECUTION_PLATFORM", defaults.execution_platform
            ),
            execution_platform_version=os.getenv(
                "BPMN_MODELER_EXECUTION_PLATFORM_VERSION",
                defaults.execution_platform_version,
            ),
            log_level=os.getenv("BPMN_MODELER_LOG_LEVEL", defaults.log_level).upper(),
        )


__all__ = ["ModelerConfig"]
