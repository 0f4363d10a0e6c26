"""
ID generation for process elements and flows.

Generators are plain zero-argument callables returning an ID suffix, so
tests can inject deterministic sequences.
"""

from typing import Callable, Container
from uuid import uuid4

from bpmn_modeler.core.exceptions import IdGenerationError

IdGenerator = Callable[[], str]

ID_SUFFIX_LENGTH = 8
MAX_ID_ATTEMPTS = 1000


def random_suffix() -> str:
    """Return an 8-character alphanumeric suffix."""
    return uuid4().hex[:ID_SUFFIX_LENGTH]


def generate_unique_id(
    prefix: str,
    taken: Container[str],
    generator: IdGenerator = random_suffix,
) -> str:
    """Generate ``{prefix}_{suffix}``, regenerating on collision.

    Raises:
        IdGenerationError: If the generator keeps producing taken IDs
    """
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = f"{prefix}_{generator()}"
        if candidate not in taken:
            return candidate
    raise IdGenerationError(
        f"Could not generate a unique '{prefix}' ID after {MAX_ID_ATTEMPTS} attempts"
    )


__all__ = [
    "IdGenerator",
    "ID_SUFFIX_LENGTH",
    "random_suffix",
    "generate_unique_id",
]
