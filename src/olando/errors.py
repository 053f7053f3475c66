"""Error taxonomy for the issuance engine.

Fatal errors propagate to the caller. The only recovered failure is the
backward quote, which the sizing adapter turns into a failed
QuoteOutcome instead of raising.
"""

from __future__ import annotations


class OlandoError(Exception):
    """Base class for all issuance engine errors."""


class MalformedCommitment(OlandoError, ValueError):
    """The issuance UTXO commitment cannot be decoded or encoded."""


class InvalidTimeRange(OlandoError, ValueError):
    """Evaluation time precedes the contract deployment time."""


class QuoteUnavailable(OlandoError):
    """The AMM collaborator could not quote the requested trade."""


class ConfigError(OlandoError, ValueError):
    """Deployment configuration is missing or malformed."""
