"""
Utility modules.

- constants: Physical constants, unit conversions and the missing-value sentinel
- output: Scene and sounding export (JSON, CSV, images)
"""

from skewtlogp.utils.constants import (
    MISSING_VALUE,
    is_missing,
    any_missing,
    missing_mask,
)

__all__ = [
    "MISSING_VALUE",
    "is_missing",
    "any_missing",
    "missing_mask",
]
