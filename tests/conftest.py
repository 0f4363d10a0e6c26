"""Pytest configuration for bpmn-modeler tests."""

import sys
from itertools import count
from pathlib import Path

import pytest

# Add the project root to the path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from bpmn_modeler.models.bpmn_elements import BPMNElementType  # noqa: E402
from bpmn_modeler.models.process import BPMNProcess  # noqa: E402


def make_sequential_generator(start: int = 1):
    """ID suffix generator yielding 00000001, 00000002, ..."""
    counter = count(start)
    return lambda: f"{next(counter):08d}"


@pytest.fixture
def sequential_ids():
    """Deterministic ID suffix generator."""
    return make_sequential_generator()


@pytest.fixture
def process():
    """Fresh process with random IDs."""
    return BPMNProcess()


@pytest.fixture
def deterministic_process(sequential_ids):
    """Fresh process with predictable IDs."""
    return BPMNProcess(id_generator=sequential_ids)


@pytest.fixture
def linear_process():
    """Start -> Review (user task) -> Done (end event), fully connected."""
    process = BPMNProcess("Process_linear")
    process.name = "Linear"
    start = process.get_elements()[0]
    task = process.add_element(
        BPMNElementType.USER_TASK, id="Task_review", name="Review", assignee="john"
    )
    end = process.add_element(BPMNElementType.END_EVENT, id="End_done", name="Done")
    process.add_sequence_flow(start.id, task.id, id="Flow_1")
    process.add_sequence_flow(task.id, end.id, id="Flow_2")
    return process
