"""Pydantic wire schemas."""

from licensedb.schemas.audit import AuditListResponse, AuditResponse, ChangeLogResponse
from licensedb.schemas.auth import CurrentUser, JWTClaims
from licensedb.schemas.common import ErrorResponse, PaginationMeta
from licensedb.schemas.null_string import NullString
from licensedb.schemas.obligation import (
    ObligationCreateRequest,
    ObligationListResponse,
    ObligationPatchRequest,
    ObligationResponse,
)
from licensedb.schemas.optional import FieldState, OptionalField, OptionalNullable

__all__ = [
    "AuditListResponse",
    "AuditResponse",
    "ChangeLogResponse",
    "CurrentUser",
    "JWTClaims",
    "ErrorResponse",
    "PaginationMeta",
    "NullString",
    "ObligationCreateRequest",
    "ObligationListResponse",
    "ObligationPatchRequest",
    "ObligationResponse",
    "FieldState",
    "OptionalField",
    "OptionalNullable",
]
