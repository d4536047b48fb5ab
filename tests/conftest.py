# tests/conftest.py
from typing import Dict

import pytest


def sus_answers(value_odd: float, value_even: float) -> Dict[str, float]:
    return {f"Q{i}": (value_odd if i % 2 else value_even) for i in range(1, 11)}


@pytest.fixture
def sus_midpoint() -> Dict[str, float]:
    """All ten SUS items at the neutral answer (2 on 0..4)."""
    return sus_answers(2, 2)


@pytest.fixture
def sus_best() -> Dict[str, float]:
    """Best possible SUS answers: agree with odd items, disagree with even ones."""
    return sus_answers(4, 0)

