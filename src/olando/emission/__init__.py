"""Emission math — fixed-point kernel and the emission-cap curve."""

from olando.emission.fixed_point import (
    SCALE,
    scaled_divide,
    scaled_multiply,
    scaled_square,
)
from olando.emission.curve import emission_cap

__all__ = [
    "SCALE",
    "scaled_divide",
    "scaled_multiply",
    "scaled_square",
    "emission_cap",
]
