"""
Account Service Domain Enums
"""

from enum import Enum


class ClaimType(str, Enum):
    """Profile claim types attached to an account"""

    name = "name"


class AdmissionResult(str, Enum):
    """Outcome of a rate limiter admission check"""

    allowed = "allowed"
    denied = "denied"
