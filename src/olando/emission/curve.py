"""Emission-cap curve — the maximum cumulative issuance at a point in time.

The issuance contract caps cumulative emission with a bounded-growth
curve over the contract's lifetime t (seconds):

    cap(t) = initial_supply × (1 − 1 / (1 + K·t·10⁻⁹)²)

evaluated in SCALE fixed point exactly as the contract does:

    denom    = SCALE + K·t
    denom_sq = denom² / SCALE
    inverse  = SCALE² / denom_sq
    cap      = initial_supply × (SCALE − inverse) / SCALE

Properties:
- cap(0) == 0: nothing is issuable at the deployment instant.
- Monotonically non-decreasing in t, approaching initial_supply.
- Each division truncates, so the cap never exceeds the continuous value.

K is a consensus constant (EMISSION_RATE_K), not an argument.
"""

from __future__ import annotations

from olando.emission.fixed_point import SCALE, scaled_divide, scaled_square
from olando.errors import InvalidTimeRange
from olando.policy.params import EMISSION_RATE_K


def emission_cap(initial_supply: int, deployment_time: int, now: int) -> int:
    """Return the emission cap at `now` for a contract deployed at `deployment_time`.

    Raises InvalidTimeRange if `now` precedes `deployment_time`.
    """
    elapsed = now - deployment_time
    if elapsed < 0:
        raise InvalidTimeRange(
            f"Evaluation time {now} precedes deployment time {deployment_time}"
        )

    denom = SCALE + EMISSION_RATE_K * elapsed
    denom_sq = scaled_square(denom)
    inverse = scaled_divide(SCALE, denom_sq)
    return initial_supply * (SCALE - inverse) // SCALE
