"""
Fill-rate classification.

Two independent scales:
- remarks label: 95 / 85 / 70 / >0
- display class: 90 / 70
"""

from models.report import FillRateClass

EXCELLENT_MIN = 95
GOOD_MIN = 85
FAIR_MIN = 70

HIGH_CLASS_MIN = 90
MEDIUM_CLASS_MIN = 70


def fill_rate_remarks(fill_rate: int) -> str:
    """
    Status label stored in `remarks`.

    Zero (nothing delivered or nothing ordered) has no label.
    """
    if fill_rate >= EXCELLENT_MIN:
        return "Excellent"
    if fill_rate >= GOOD_MIN:
        return "Good"
    if fill_rate >= FAIR_MIN:
        return "Fair"
    if fill_rate > 0:
        return "Needs Attention"
    return ""


def fill_rate_class(fill_rate: int) -> FillRateClass:
    """Three-level display class for table rows."""
    if fill_rate >= HIGH_CLASS_MIN:
        return FillRateClass.HIGH
    if fill_rate >= MEDIUM_CLASS_MIN:
        return FillRateClass.MEDIUM
    return FillRateClass.LOW
