"""Database module for SQLAlchemy models."""

from licensedb.database.models import (
    AUDIT_TYPE_OBLIGATION,
    Audit,
    ChangeLog,
    License,
    Obligation,
    ObligationLicense,
    User,
)

__all__ = [
    "AUDIT_TYPE_OBLIGATION",
    "Audit",
    "ChangeLog",
    "License",
    "Obligation",
    "ObligationLicense",
    "User",
]
