"""Tri-state request fields for partial updates.

Plain JSON decoding gives an omitted key the same value as an explicit
zero value, so a PATCH handler cannot tell "leave unchanged" from "set to
empty" from "clear". The wrappers here keep that information:

* ``OptionalNullable[T]`` is one of undefined, null or present(value).
* ``OptionalField[T]`` is one of undefined or present(value); an explicit
  ``null`` is rejected with "field value cannot be null".

Both can be declared as pydantic model fields (absent keys fall back to the
undefined default) or decoded directly from a mapping with
``from_document``.
"""

from enum import Enum
from typing import Annotated, Any, Generic, Mapping, Optional, TypeVar, get_args

from pydantic import GetCoreSchemaHandler, Strict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError, core_schema

from licensedb.core.exceptions import DecodeError
from licensedb.utils.validation import describe_validation_errors

T = TypeVar("T")


class FieldState(str, Enum):
    """Decode outcome of a single request field."""

    UNDEFINED = "undefined"
    NULL = "null"
    PRESENT = "present"


class _DecodedField(Generic[T]):
    """Shared machinery of the tri-state wrappers."""

    __slots__ = ("state", "value")

    allow_null: bool = True

    def __init__(self, state: FieldState = FieldState.UNDEFINED, value: Optional[T] = None):
        if state is FieldState.NULL and not self.allow_null:
            raise ValueError("field value cannot be null")
        if state is not FieldState.PRESENT and value is not None:
            raise ValueError(f"{state.value} field cannot carry a value")
        self.state = state
        self.value = value

    @classmethod
    def undefined(cls):
        return cls()

    @classmethod
    def of(cls, value: T):
        return cls(FieldState.PRESENT, value)

    @property
    def is_defined(self) -> bool:
        """True when the key was present in the input, even as null."""
        return self.state is not FieldState.UNDEFINED

    @property
    def is_present(self) -> bool:
        return self.state is FieldState.PRESENT

    def get(self, default: Optional[T] = None) -> Optional[T]:
        return self.value if self.state is FieldState.PRESENT else default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _DecodedField):
            return NotImplemented
        return type(self) is type(other) and (self.state, self.value) == (other.state, other.value)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.state, self.value))

    def __repr__(self) -> str:
        if self.state is FieldState.PRESENT:
            return f"{type(self).__name__}({self.value!r})"
        return f"{type(self).__name__}.{self.state.value}"

    @classmethod
    def _from_decoded(cls, value: Any):
        if value is None:
            if not cls.allow_null:
                raise PydanticCustomError("null_value", "field value cannot be null")
            return cls(FieldState.NULL)
        return cls.of(value)

    @staticmethod
    def _serialize(field: "_DecodedField") -> Any:
        return field.value

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        item_type = get_args(source_type)[0] if get_args(source_type) else Any
        # strict: "false", 0 or "1" are type mismatches, not booleans
        if item_type is not Any:
            item_type = Annotated[item_type, Strict()]
        item_schema = handler.generate_schema(item_type)
        # null reaches _from_decoded so that OptionalField can reject it
        # with its own message instead of the item type's error
        return core_schema.no_info_after_validator_function(
            cls._from_decoded,
            core_schema.nullable_schema(item_schema),
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )

    @classmethod
    def from_document(cls, document: Mapping[str, Any], key: str, item_type: Any = Any):
        """Decode ``document[key]`` as ``item_type``.

        Args:
            document: Decoded JSON object
            key: Field name to read
            item_type: Expected type of a present value

        Returns:
            Wrapper in the state matching the input

        Raises:
            DecodeError: If the value does not match ``item_type`` or is a
                forbidden null
        """
        if key not in document:
            return cls.undefined()
        try:
            return TypeAdapter(cls[item_type]).validate_python(document[key])
        except PydanticValidationError as e:
            raise DecodeError(
                f"invalid value for field '{key}'",
                original_error=e,
                detail=describe_validation_errors(e.errors()),
            ) from e


class OptionalNullable(_DecodedField[T]):
    """Field that may be omitted, explicitly null, or carry a value."""

    __slots__ = ()

    allow_null = True

    @classmethod
    def null(cls):
        return cls(FieldState.NULL)

    @property
    def is_null(self) -> bool:
        return self.state is FieldState.NULL


class OptionalField(_DecodedField[T]):
    """Field that may be omitted or carry a value, but never be null."""

    __slots__ = ()

    allow_null = False
