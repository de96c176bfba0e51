"""Nullable string wire adapter.

Maps a string that is either valid (has a value) or invalid (absent) to and
from JSON: valid strings travel as themselves, invalid ones as ``null``.
Incoming ``null`` and ``""`` both decode to invalid.
"""

from typing import Any, Optional

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


class NullString:
    """String with an explicit validity flag."""

    __slots__ = ("string", "valid")

    def __init__(self, string: str = "", valid: bool = False):
        self.string = string if valid else ""
        self.valid = valid

    @classmethod
    def of(cls, string: str) -> "NullString":
        return cls(string, valid=True)

    @classmethod
    def from_wire(cls, raw: Optional[str]) -> "NullString":
        if raw is None or raw == "":
            return cls()
        return cls.of(raw)

    def to_wire(self) -> Optional[str]:
        return self.string if self.valid else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NullString):
            return NotImplemented
        return (self.valid, self.string) == (other.valid, other.string)

    def __hash__(self) -> int:
        return hash((self.valid, self.string))

    def __repr__(self) -> str:
        return f"NullString({self.string!r})" if self.valid else "NullString(null)"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        from_wire_schema = core_schema.no_info_after_validator_function(
            cls.from_wire,
            core_schema.nullable_schema(core_schema.str_schema()),
        )
        return core_schema.json_or_python_schema(
            json_schema=from_wire_schema,
            python_schema=core_schema.union_schema(
                [core_schema.is_instance_schema(cls), from_wire_schema]
            ),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_wire(),
                return_schema=core_schema.nullable_schema(core_schema.str_schema()),
            ),
        )
