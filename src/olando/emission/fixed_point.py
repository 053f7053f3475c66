"""Fixed-point arithmetic over integers scaled by SCALE.

Real numbers are carried as Python ints multiplied by SCALE (1e9).
Every combination multiplies first and then floor-divides, so results
are exact and reproducible bit-for-bit against the contract's integer
arithmetic. Callers only pass non-negative values, so floor division
is the same as truncation toward zero.

Truncation at each step rounds the emission cap down, never up: the
computed cap cannot exceed the continuous curve.
"""

from __future__ import annotations

SCALE = 10**9


def scaled_multiply(a: int, b: int) -> int:
    """(a * b) / SCALE, truncated."""
    return (a * b) // SCALE


def scaled_divide(a: int, b: int) -> int:
    """(a * SCALE) / b, truncated."""
    return (a * SCALE) // b


def scaled_square(a: int) -> int:
    return scaled_multiply(a, a)
