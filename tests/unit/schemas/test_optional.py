"""Unit tests for the tri-state request field wrappers."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from licensedb.core.exceptions import DecodeError, ValidationError
from licensedb.schemas.obligation import ObligationCreateRequest, ObligationPatchRequest
from licensedb.schemas.optional import FieldState, OptionalField, OptionalNullable


class TestOptionalNullable:
    def test_absent_key_is_undefined(self):
        field = OptionalNullable.from_document({}, "f", str)

        assert field.state is FieldState.UNDEFINED
        assert not field.is_defined
        assert field.value is None

    def test_explicit_null_is_null(self):
        field = OptionalNullable.from_document({"f": None}, "f", str)

        assert field.state is FieldState.NULL
        assert field.is_defined
        assert field.is_null
        assert field.get("fallback") == "fallback"

    def test_value_is_present(self):
        field = OptionalNullable.from_document({"f": "x"}, "f", str)

        assert field.state is FieldState.PRESENT
        assert field == OptionalNullable.of("x")

    def test_zero_value_is_present_not_undefined(self):
        field = OptionalNullable.from_document({"f": ""}, "f", str)

        assert field.is_present
        assert field.value == ""

    @pytest.mark.parametrize(
        "raw, item_type",
        [(5, str), ("yes", bool), ("false", bool), (1, bool), (0, bool), ("1", int)],
    )
    def test_type_mismatch_raises_decode_error(self, raw, item_type):
        with pytest.raises(DecodeError) as exc_info:
            OptionalNullable.from_document({"f": raw}, "f", item_type)

        assert "'f'" in exc_info.value.message
        assert isinstance(exc_info.value, ValidationError)

    def test_structured_type(self):
        field = OptionalNullable.from_document({"f": ["MIT", "GPL-2.0-only"]}, "f", list[str])

        assert field.value == ["MIT", "GPL-2.0-only"]


class TestOptionalField:
    def test_absent_key_is_undefined(self):
        field = OptionalField.from_document({"other": 1}, "f", bool)

        assert field.state is FieldState.UNDEFINED

    def test_false_is_present(self):
        field = OptionalField.from_document({"f": False}, "f", bool)

        assert field.is_present
        assert field.value is False

    def test_null_is_rejected(self):
        with pytest.raises(DecodeError) as exc_info:
            OptionalField.from_document({"f": None}, "f", bool)

        assert "field value cannot be null" in exc_info.value.detail

    def test_null_state_cannot_be_built(self):
        with pytest.raises(ValueError):
            OptionalField(FieldState.NULL)

    def test_wrappers_of_different_kinds_are_not_equal(self):
        assert OptionalField.of("x") != OptionalNullable.of("x")


class TestObligationPatchRequest:
    def test_empty_body_leaves_every_field_undefined(self):
        request = ObligationPatchRequest.model_validate({})

        for name in ObligationPatchRequest.model_fields:
            assert not getattr(request, name).is_defined, name

    def test_fields_keep_their_state(self):
        request = ObligationPatchRequest.model_validate(
            {"comment": None, "active": False, "type": "Risk"}
        )

        assert request.comment.is_null
        assert request.active == OptionalField.of(False)
        assert request.type.value == "Risk"
        assert not request.text.is_defined

    def test_null_for_non_nullable_field_fails(self):
        with pytest.raises(PydanticValidationError) as exc_info:
            ObligationPatchRequest.model_validate({"active": None})

        assert "field value cannot be null" in str(exc_info.value)

    @pytest.mark.parametrize(
        "body",
        [
            '{"type": 5}',
            '{"active": "yes"}',
            '{"active": "false"}',
            '{"active": 0}',
            '{"modifications": 1}',
            '{"text_updatable": "on"}',
        ],
    )
    def test_wrong_type_fails(self, body):
        with pytest.raises(PydanticValidationError):
            ObligationPatchRequest.model_validate_json(body)

    def test_json_strings_still_decode_as_text(self):
        request = ObligationPatchRequest.model_validate_json('{"text": "new", "active": true}')

        assert request.text == OptionalField.of("new")
        assert request.active == OptionalField.of(True)

    def test_decode_wraps_errors(self):
        with pytest.raises(DecodeError) as exc_info:
            ObligationPatchRequest.decode({"active": 1})

        assert exc_info.value.message == "invalid json body"
        assert "active" in exc_info.value.detail

    def test_decode_keeps_field_states(self):
        request = ObligationPatchRequest.decode({"comment": None, "active": False})

        assert request.comment.is_null
        assert request.active == OptionalField.of(False)

    def test_json_null_comment(self):
        request = ObligationPatchRequest.model_validate_json('{"comment": null}')

        assert request.comment.is_null


class TestObligationCreateRequest:
    @pytest.mark.parametrize("field", ["modifications", "active"])
    @pytest.mark.parametrize("raw", ["yes", "false", 1, 0])
    def test_boolean_flags_are_strict(self, field, raw):
        body = {"topic": "t", "type": "Obligation", "text": "body", "classification": "green"}
        body[field] = raw

        with pytest.raises(PydanticValidationError):
            ObligationCreateRequest.model_validate(body)
