"""Match rejection, rejected pair blacklist and abuse detection."""

from .abuse_policy import AbusePolicy, AbuseAssessment, evaluate_abuse
from .service import RejectionService, RejectionResult

__all__ = [
    "AbusePolicy",
    "AbuseAssessment",
    "evaluate_abuse",
    "RejectionService",
    "RejectionResult",
]
