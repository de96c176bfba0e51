"""Audit trail response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from licensedb.schemas.common import PaginationMeta


class ChangeLogResponse(BaseModel):
    """One changed field inside an audit."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    field: str = Field(..., description="Name of the changed field")
    old_value: Optional[str] = Field(None, description="Value before the update")
    updated_value: Optional[str] = Field(None, description="Value after the update")


class AuditResponse(BaseModel):
    """Changes applied to an entity by one update."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int = Field(..., description="Internal id of the acting user")
    type_id: int = Field(..., description="Internal id of the audited entity")
    type: str = Field(..., description="Kind of the audited entity")
    timestamp: datetime
    change_logs: list[ChangeLogResponse] = Field(default_factory=list)


class AuditListResponse(BaseModel):
    """Paginated audit listing."""

    status: int
    data: list[AuditResponse]
    meta: PaginationMeta
