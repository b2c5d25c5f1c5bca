import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import CircuitIssueCode
from .validator import CircuitValidator

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "CircuitIssueCode",
    "CircuitValidator",
]
