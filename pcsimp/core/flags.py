"""Attribute flags describing which channels a point cloud carries.

Each :class:`AttributeFlag` owns exactly one bit of an 8-bit mask. The two
composite flags (``POINTSRGBNORMALS`` and ``MESH``) have their own bit and
do not set the bits of the simple flags they stand for. Code that wants the
channels a mask effectively selects should call :func:`decompose`; code that
wants the literal declared bits should call :func:`has`.

    >>> mask = compose(compose(0, AttributeFlag.POINTS), AttributeFlag.RGB)
    >>> mask
    3
    >>> has(compose(0, AttributeFlag.MESH), AttributeFlag.TRIANGLES)
    False
    >>> AttributeFlag.TRIANGLES in decompose(compose(0, AttributeFlag.MESH))
    True
"""

from __future__ import annotations
import operator
from enum import Enum
from typing import Dict, FrozenSet

import numpy as np

MASK_BITS = 8
MASK_LIMIT = (1 << MASK_BITS) - 1


class AttributeFlag(Enum):
    """Attribute kinds; the value is the bit position inside the mask."""

    POINTS = 0
    RGB = 1
    NORMALS = 2
    TRIANGLES = 3
    POINTSRGBNORMALS = 6
    MESH = 7

    @property
    def bit(self) -> int:
        return self.value

    @property
    def mask(self) -> int:
        return 1 << self.value

    @property
    def is_composite(self) -> bool:
        return self in _COMPOSITES

    @classmethod
    def from_name(cls, name: str) -> "AttributeFlag":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(f"Unknown attribute flag '{name}' (expected one of {valid}).") from None


SIMPLE_FLAGS: FrozenSet[AttributeFlag] = frozenset(
    {AttributeFlag.POINTS, AttributeFlag.RGB, AttributeFlag.NORMALS, AttributeFlag.TRIANGLES}
)

_COMPOSITES: Dict[AttributeFlag, FrozenSet[AttributeFlag]] = {
    AttributeFlag.POINTSRGBNORMALS: frozenset(
        {AttributeFlag.POINTS, AttributeFlag.RGB, AttributeFlag.NORMALS}
    ),
    AttributeFlag.MESH: frozenset(
        {AttributeFlag.POINTS, AttributeFlag.RGB, AttributeFlag.NORMALS, AttributeFlag.TRIANGLES}
    ),
}


def _check_mask(mask: int) -> int:
    if isinstance(mask, (bool, np.bool_)):
        raise TypeError("mask must be an integer, got bool.")
    try:
        mask = operator.index(mask)
    except TypeError:
        raise TypeError(f"mask must be an integer, got {type(mask).__name__}.") from None
    if not 0 <= mask <= MASK_LIMIT:
        raise ValueError(f"mask {mask} does not fit in {MASK_BITS} bits.")
    return mask


def _check_flag(flag: AttributeFlag) -> AttributeFlag:
    if not isinstance(flag, AttributeFlag):
        raise TypeError(f"Expected an AttributeFlag, got {type(flag).__name__}.")
    return flag


def compose(mask: int, flag: AttributeFlag) -> int:
    """Return ``mask`` with the declared bit of ``flag`` set."""
    return _check_mask(mask) | _check_flag(flag).mask


def compose_all(*flags: AttributeFlag, mask: int = 0) -> int:
    for flag in flags:
        mask = compose(mask, flag)
    return mask


def has(mask: int, flag: AttributeFlag) -> bool:
    """Test the declared bit of ``flag`` only."""
    return bool(_check_mask(mask) & _check_flag(flag).mask)


def constituents(flag: AttributeFlag) -> FrozenSet[AttributeFlag]:
    """Simple flags a flag stands for (itself, for simple flags)."""
    _check_flag(flag)
    return _COMPOSITES.get(flag, frozenset({flag}))


def decompose(mask: int) -> FrozenSet[AttributeFlag]:
    """Simple flags effectively selected by ``mask``.

    Composite bits expand to their constituents. Bits 4 and 5 carry no
    meaning and are ignored.
    """
    _check_mask(mask)
    out: set = set()
    for flag in AttributeFlag:
        if mask & flag.mask:
            out |= constituents(flag)
    return frozenset(out)


def implies(mask: int, flag: AttributeFlag) -> bool:
    """True if every constituent of ``flag`` is selected by ``mask``."""
    return constituents(flag) <= decompose(mask)


def declared(mask: int) -> FrozenSet[AttributeFlag]:
    """Flags whose own bit is set in ``mask``."""
    _check_mask(mask)
    return frozenset(f for f in AttributeFlag if mask & f.mask)
