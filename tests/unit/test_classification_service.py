"""
Unit tests for fill-rate remarks and display classes.
"""

import pytest

from models.report import FillRateClass
from services.classification_service import fill_rate_class, fill_rate_remarks


@pytest.mark.parametrize("fill_rate,expected", [
    (100, "Excellent"),
    (95, "Excellent"),
    (94, "Good"),
    (85, "Good"),
    (84, "Fair"),
    (70, "Fair"),
    (69, "Needs Attention"),
    (1, "Needs Attention"),
    (0, ""),
])
def test_fill_rate_remarks(fill_rate, expected):
    assert fill_rate_remarks(fill_rate) == expected


@pytest.mark.parametrize("fill_rate,expected", [
    (100, FillRateClass.HIGH),
    (90, FillRateClass.HIGH),
    (89, FillRateClass.MEDIUM),
    (70, FillRateClass.MEDIUM),
    (69, FillRateClass.LOW),
    (0, FillRateClass.LOW),
])
def test_fill_rate_class(fill_rate, expected):
    assert fill_rate_class(fill_rate) == expected


def test_scales_are_independent():
    """92 is only Good as a remark but high as a display class."""
    assert fill_rate_remarks(92) == "Good"
    assert fill_rate_class(92) == FillRateClass.HIGH
