"""Obligation request and response schemas."""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from licensedb.core.exceptions import DecodeError
from licensedb.schemas.common import PaginationMeta
from licensedb.schemas.null_string import NullString
from licensedb.schemas.optional import OptionalField, OptionalNullable
from licensedb.utils.validation import describe_validation_errors


class ObligationCreateRequest(BaseModel):
    """Body of POST /obligations."""

    topic: str = Field(..., min_length=1, description="Unique topic of the obligation")
    type: str = Field(..., min_length=1, description="Obligation type, e.g. obligation or risk")
    text: str = Field(..., min_length=1, description="Full obligation text")
    classification: str = Field(..., min_length=1, description="Classification, e.g. green or red")
    comment: NullString = Field(default_factory=NullString, description="Optional comment")
    modifications: bool = Field(
        default=False, strict=True, description="Whether modifications are involved"
    )
    active: bool = Field(default=True, strict=True, description="Whether the obligation is active")
    shortnames: list[str] = Field(
        default_factory=list, description="Shortnames of licenses to link the obligation to"
    )


class ObligationPatchRequest(BaseModel):
    """Body of PATCH /obligations/{topic}.

    Every field is optional; omitted keys leave the stored value untouched.
    Only ``comment`` accepts ``null``, which clears it.
    """

    type: OptionalField[str] = Field(default_factory=OptionalField)
    text: OptionalField[str] = Field(default_factory=OptionalField)
    classification: OptionalField[str] = Field(default_factory=OptionalField)
    modifications: OptionalField[bool] = Field(default_factory=OptionalField)
    comment: OptionalNullable[str] = Field(default_factory=OptionalNullable)
    active: OptionalField[bool] = Field(default_factory=OptionalField)
    text_updatable: OptionalField[bool] = Field(default_factory=OptionalField)

    @classmethod
    def decode(cls, document: Mapping[str, Any]) -> "ObligationPatchRequest":
        """Decode a parsed JSON object, raising DecodeError on any bad field."""
        try:
            return cls.model_validate(document)
        except PydanticValidationError as e:
            raise DecodeError(
                "invalid json body",
                original_error=e,
                detail=describe_validation_errors(e.errors()),
            ) from e


class ObligationResponse(BaseModel):
    """Obligation as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    topic: str
    type: str
    text: str
    classification: str
    comment: NullString = Field(default_factory=NullString)
    modifications: bool
    active: bool
    text_updatable: bool


class ObligationListResponse(BaseModel):
    """Envelope for obligation endpoints; single items are a one element list."""

    status: int
    data: list[ObligationResponse]
    meta: Optional[PaginationMeta] = None
