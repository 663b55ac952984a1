"""Auto-incrementing counters for sequential numbering.

One document per counter type: `{_id: counter_type, seq}`, where `seq` is the
last issued number.
"""

from enum import StrEnum


class CounterType(StrEnum):
    """Types of entities that use sequential numbering."""

    COMMENT = "comment"
