"""
XML Serializer facade

Single entry point used by BPMNProcess and the CLI for export, import and
well-formedness checks.
"""

from typing import Optional, Union

from bpmn_modeler.core.config import ModelerConfig
from bpmn_modeler.core.ids import IdGenerator
from bpmn_modeler.models.process import BPMNProcess
from bpmn_modeler.serialization.xml_generation import BPMNXMLGenerator
from bpmn_modeler.serialization.xml_parsing import BPMNXMLParser, parse_document


class XMLSerializer:
    """Bidirectional codec between BPMNProcess and BPMN 2.0 XML."""

    def __init__(self, config: Optional[ModelerConfig] = None):
        self.config = config or ModelerConfig()
        self.generator = BPMNXMLGenerator(self.config)
        self.parser = BPMNXMLParser(self.config)

    def serialize(self, process: BPMNProcess) -> str:
        return self.generator.generate_xml(process)

    def deserialize(
        self, xml: Union[str, bytes], id_generator: Optional[IdGenerator] = None
    ) -> BPMNProcess:
        return self.parser.parse(xml, id_generator=id_generator)

    def validate(self, xml: Union[str, bytes]) -> None:
        """Check well-formedness only; no schema validation.

        Raises:
            XMLParseError: With the underlying parser message
        """
        parse_document(xml)


__all__ = ["XMLSerializer"]
