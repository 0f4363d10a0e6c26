"""
Tests for the element template registry.
"""

import pytest

from bpmn_modeler.models.bpmn_elements import (
    BPMNElement,
    BPMNElementType,
    ExclusiveGateway,
    ServiceTask,
    UserTask,
)
from bpmn_modeler.models.element_templates import (
    COMMON_VENDOR_ATTRIBUTES,
    element_class_for,
    get_element_template,
    get_element_types,
    get_vendor_attributes,
)


# ===========================
# Templates
# ===========================


class TestTemplates:
    """Test default templates per element type."""

    @pytest.mark.parametrize(
        "element_type,width,height",
        [
            ("bpmn:UserTask", 100, 80),
            ("bpmn:ServiceTask", 100, 80),
            ("bpmn:StartEvent", 36, 36),
            ("bpmn:EndEvent", 36, 36),
            ("bpmn:ExclusiveGateway", 50, 50),
            ("bpmn:ParallelGateway", 50, 50),
        ],
    )
    def test_template_sizes(self, element_type, width, height):
        template = get_element_template(element_type)
        assert template.type == element_type
        assert template.size.width == width
        assert template.size.height == height

    def test_task_templates_have_job_defaults(self):
        for element_type in (BPMNElementType.USER_TASK, BPMNElementType.SERVICE_TASK):
            properties = get_element_template(element_type).properties
            assert properties == {"asyncBefore": False, "asyncAfter": False, "exclusive": True}

    def test_event_templates_have_no_properties(self):
        assert get_element_template("bpmn:StartEvent").properties == {}

    def test_unknown_type_gets_empty_template(self):
        template = get_element_template("bpmn:Whatever")
        assert template.type == "bpmn:Whatever"
        assert template.size is None
        assert template.properties == {}

    def test_templates_are_fresh_copies(self):
        """Mutating a returned template must not affect later lookups."""
        first = get_element_template("bpmn:UserTask")
        first.properties["exclusive"] = False
        first.size.width = 999

        second = get_element_template("bpmn:UserTask")
        assert second.properties["exclusive"] is True
        assert second.size.width == 100


# ===========================
# Vendor Attributes
# ===========================


class TestVendorAttributes:
    """Test Camunda attribute allow-lists."""

    def test_vendor_attributes_start_with_common_set(self):
        for element_type in ("bpmn:UserTask", "bpmn:ServiceTask", "bpmn:ScriptTask"):
            attributes = get_vendor_attributes(element_type)
            assert attributes[: len(COMMON_VENDOR_ATTRIBUTES)] == COMMON_VENDOR_ATTRIBUTES

    def test_vendor_attributes_per_type(self):
        assert "assignee" in get_vendor_attributes("bpmn:UserTask")
        assert "candidateGroups" in get_vendor_attributes("bpmn:UserTask")
        assert "topic" in get_vendor_attributes("bpmn:ServiceTask")
        assert "class" in get_vendor_attributes("bpmn:ServiceTask")
        assert "scriptFormat" in get_vendor_attributes("bpmn:ScriptTask")
        assert "assignee" not in get_vendor_attributes("bpmn:ServiceTask")

    def test_vendor_attributes_for_unknown_type(self):
        assert get_vendor_attributes("acme:Thing") == COMMON_VENDOR_ATTRIBUTES

    def test_vendor_attributes_not_shared(self):
        get_vendor_attributes("bpmn:UserTask").append("bogus")
        assert "bogus" not in get_vendor_attributes("bpmn:UserTask")
        assert "bogus" not in COMMON_VENDOR_ATTRIBUTES


# ===========================
# Type Catalogue
# ===========================


class TestTypeCatalogue:
    """Test the element type catalogue and model classes."""

    def test_element_types_catalogue(self):
        types = get_element_types()
        assert "bpmn:StartEvent" in types
        assert "bpmn:UserTask" in types
        assert "bpmn:ExclusiveGateway" in types
        assert "bpmn:SequenceFlow" not in types
        assert len(types) == len(set(types))

    def test_element_class_for(self):
        assert element_class_for("bpmn:UserTask") is UserTask
        assert element_class_for(BPMNElementType.SERVICE_TASK) is ServiceTask
        assert element_class_for("bpmn:ExclusiveGateway") is ExclusiveGateway
        assert element_class_for("bpmn:ParallelGateway") is BPMNElement
