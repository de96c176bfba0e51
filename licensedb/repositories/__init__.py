"""Data access layer."""

from licensedb.repositories.audit_repository import AuditRepository
from licensedb.repositories.base_repository import BaseRepository
from licensedb.repositories.license_repository import LicenseRepository
from licensedb.repositories.obligation_repository import (
    FieldUpdate,
    ObligationField,
    ObligationRepository,
)
from licensedb.repositories.user_repository import UserRepository

__all__ = [
    "AuditRepository",
    "BaseRepository",
    "LicenseRepository",
    "FieldUpdate",
    "ObligationField",
    "ObligationRepository",
    "UserRepository",
]
