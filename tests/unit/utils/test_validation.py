from licensedb.utils.validation import describe_validation_errors


def test_joins_location_and_message():
    errors = [
        {"loc": ("active",), "msg": "field value cannot be null"},
        {"loc": ("type",), "msg": "Input should be a valid string"},
    ]

    assert describe_validation_errors(errors) == (
        "active: field value cannot be null; type: Input should be a valid string"
    )


def test_skips_request_prefix():
    errors = [{"loc": ("body", "active"), "msg": "Input should be a valid boolean"}]

    assert describe_validation_errors(errors, skip_loc=1) == "active: Input should be a valid boolean"


def test_message_only_when_location_is_consumed():
    errors = [{"loc": ("body",), "msg": "JSON decode error"}]

    assert describe_validation_errors(errors, skip_loc=1) == "JSON decode error"
