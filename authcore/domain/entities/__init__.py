"""
Account Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .enums import AdmissionResult, ClaimType
from .account import Account
from .account_claim import AccountClaim
from .reset_token import ResetToken
from .audit_event import AuditEvent
from .rate_window import RateWindow

__all__ = [
    # Enums
    "AdmissionResult",
    "ClaimType",
    # Entities
    "Account",
    "AccountClaim",
    "ResetToken",
    "AuditEvent",
    "RateWindow",
]
