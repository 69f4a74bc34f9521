"""Exceptions raised by the matching engine.

Taxonomy:
- ValidationError: malformed input (mismatched embeddings, illegal transition)
- NotFoundError: referenced match or item does not exist
- ConflictError: duplicate blacklist insert (soft, swallowed internally)

Secondary side effects that fail while the primary write succeeds are not
raised at all; they are logged and reported as PartialFailure entries on the
operation result.
"""

from dataclasses import dataclass


class MatchingError(Exception):
    """Base exception for matching operations"""
    pass


class ValidationError(MatchingError):
    """Malformed input to a scoring function or lifecycle operation"""
    pass


class DimensionMismatchError(ValidationError):
    """Embedding vectors have different lengths"""

    def __init__(self, len_a: int, len_b: int):
        super().__init__(f"Embedding dimensions differ: {len_a} != {len_b}")
        self.len_a = len_a
        self.len_b = len_b


class InvalidTransitionError(ValidationError):
    """Status change not allowed by the state machine"""
    pass


class NotAPartyError(ValidationError):
    """User owns neither item of the match"""
    pass


class NotFoundError(MatchingError):
    """Match or item does not exist"""
    pass


class ConflictError(MatchingError):
    """Row already exists (duplicate key)"""
    pass


@dataclass
class PartialFailure:
    """A non-critical side effect that failed after the primary write succeeded.

    Attributes:
        operation: What was attempted (e.g. "revert_item_status")
        target_id: Id of the row the side effect was aimed at
        error: String form of the underlying exception
    """
    operation: str
    target_id: str
    error: str
