"""Tests for ObligationService against a SQLite database."""

import pytest
from sqlalchemy import func, select

from licensedb.core.exceptions import (
    ConflictError,
    DecodeError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from licensedb.database.models import Audit, ChangeLog, Obligation, ObligationLicense
from licensedb.schemas.null_string import NullString
from licensedb.schemas.obligation import ObligationCreateRequest, ObligationPatchRequest
from licensedb.services.obligation_service import ObligationService, text_digest
from licensedb.utils.pagination import PageRequest


def create_request(**overrides) -> ObligationCreateRequest:
    fields = {
        "topic": "T1",
        "type": "Obligation",
        "text": "You must give appropriate credit.",
        "classification": "green",
        "comment": NullString.of("initial"),
        "modifications": False,
        "active": True,
        "shortnames": [],
    }
    fields.update(overrides)
    return ObligationCreateRequest(**fields)


def patch(**body) -> ObligationPatchRequest:
    return ObligationPatchRequest.model_validate(body)


async def count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
def service(db_session) -> ObligationService:
    return ObligationService(db_session)


@pytest.mark.asyncio
async def test_create_obligation(service, db_session):
    obligation = await service.create_obligation(create_request())

    assert obligation.id is not None
    assert obligation.md5 == text_digest("You must give appropriate credit.")
    assert obligation.text_updatable is False
    assert obligation.comment == "initial"
    assert await count(db_session, Obligation) == 1


@pytest.mark.asyncio
async def test_create_links_known_licenses_and_skips_unknown(service, db_session):
    obligation = await service.create_obligation(
        create_request(shortnames=["MIT", "NOT-A-LICENSE", "GPL-2.0-only", "MIT"])
    )

    result = await db_session.execute(
        select(ObligationLicense).where(ObligationLicense.obligation_id == obligation.id)
    )
    assert len(result.scalars().all()) == 2


@pytest.mark.asyncio
async def test_create_with_same_topic_conflicts(service, db_session):
    await service.create_obligation(create_request())

    with pytest.raises(ConflictError):
        await service.create_obligation(create_request(text="A completely different text."))

    assert await count(db_session, Obligation) == 1


@pytest.mark.asyncio
async def test_create_with_same_text_conflicts(service, db_session):
    await service.create_obligation(create_request(text="hello"))

    with pytest.raises(ConflictError):
        await service.create_obligation(create_request(topic="T2", text="hello"))

    assert await count(db_session, Obligation) == 1


@pytest.mark.asyncio
async def test_get_unknown_topic(service):
    with pytest.raises(NotFoundError):
        await service.get_obligation("missing")


@pytest.mark.asyncio
async def test_list_filters_by_active_and_paginates(service):
    await service.create_obligation(create_request(topic="A", text="a"))
    await service.create_obligation(create_request(topic="B", text="b"))
    await service.create_obligation(create_request(topic="C", text="c", active=False))

    items, total = await service.list_obligations(True, PageRequest(page=1, limit=1))
    inactive, inactive_total = await service.list_obligations(False, PageRequest(page=1, limit=10))
    empty, _ = await service.list_obligations(True, PageRequest(page=5, limit=10))

    assert total == 2
    assert [o.topic for o in items] == ["A"]
    assert inactive_total == 1
    assert inactive[0].topic == "C"
    assert empty == []


@pytest.mark.asyncio
async def test_update_active_only_records_one_change(service, db_session):
    await service.create_obligation(create_request())

    updated = await service.update_obligation("T1", patch(active=False), "admin")

    assert updated.active is False
    assert updated.text == "You must give appropriate credit."
    audits, total = await service.list_audits("T1", PageRequest())
    assert total == 1
    assert [(c.field, c.old_value, c.updated_value) for c in audits[0].change_logs] == [
        ("Active", "true", "false")
    ]
    assert audits[0].type == "Obligation"
    assert audits[0].type_id == updated.id


@pytest.mark.asyncio
async def test_update_text_when_not_updatable_is_rejected(service, db_session):
    await service.create_obligation(create_request())

    with pytest.raises(ValidationError):
        await service.update_obligation(
            "T1", patch(text="Another text entirely.", active=False), "admin"
        )

    obligation = await service.get_obligation("T1")
    assert obligation.text == "You must give appropriate credit."
    assert obligation.active is True
    assert await count(db_session, Audit) == 0


@pytest.mark.asyncio
async def test_update_with_unchanged_text_is_allowed(service, db_session):
    await service.create_obligation(create_request())

    await service.update_obligation(
        "T1", patch(text="You must give appropriate credit."), "admin"
    )

    assert await count(db_session, Audit) == 0


@pytest.mark.asyncio
async def test_update_identical_body_writes_no_audit(service, db_session):
    await service.create_obligation(create_request())

    await service.update_obligation(
        "T1",
        patch(
            type="Obligation",
            classification="green",
            modifications=False,
            comment="initial",
            active=True,
            text_updatable=False,
        ),
        "admin",
    )

    assert await count(db_session, Audit) == 0
    assert await count(db_session, ChangeLog) == 0


@pytest.mark.asyncio
async def test_update_text_when_updatable_recomputes_digest(service):
    await service.create_obligation(create_request())
    await service.update_obligation("T1", patch(text_updatable=True), "admin")

    updated = await service.update_obligation("T1", patch(text="Credit the authors."), "admin")

    assert updated.text == "Credit the authors."
    assert updated.md5 == text_digest("Credit the authors.")
    audits, total = await service.list_audits("T1", PageRequest())
    assert total == 2
    # newest first
    assert [c.field for c in audits[0].change_logs] == ["Text"]
    assert [c.field for c in audits[1].change_logs] == ["TextUpdatable"]


@pytest.mark.asyncio
async def test_update_text_to_existing_text_conflicts(service):
    await service.create_obligation(create_request(topic="A", text="first"))
    await service.create_obligation(create_request(topic="B", text="second"))
    await service.update_obligation("B", patch(text_updatable=True), "admin")

    with pytest.raises(ConflictError):
        await service.update_obligation("B", patch(text="first"), "admin")

    obligation = await service.get_obligation("B")
    assert obligation.text == "second"


@pytest.mark.asyncio
async def test_update_multiple_fields_logs_in_fixed_order(service):
    await service.create_obligation(create_request())

    await service.update_obligation(
        "T1",
        patch(active=False, comment=None, type="Risk", classification="red"),
        "admin",
    )

    audits, _ = await service.list_audits("T1", PageRequest())
    assert [(c.field, c.old_value, c.updated_value) for c in audits[0].change_logs] == [
        ("Type", "Obligation", "Risk"),
        ("Classification", "green", "red"),
        ("Comment", "initial", None),
        ("Active", "true", "false"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"type": ""}, {"classification": ""}])
async def test_update_rejects_empty_strings(service, body):
    await service.create_obligation(create_request())

    with pytest.raises(ValidationError):
        await service.update_obligation("T1", patch(**body), "admin")


@pytest.mark.asyncio
async def test_update_unknown_topic(service):
    with pytest.raises(NotFoundError):
        await service.update_obligation("missing", patch(active=False), "admin")


@pytest.mark.asyncio
async def test_update_by_unknown_user_rolls_back(service, db_session):
    await service.create_obligation(create_request())

    with pytest.raises(InternalError):
        await service.update_obligation("T1", patch(active=False), "ghost")

    obligation = await service.get_obligation("T1")
    assert obligation.active is True
    assert await count(db_session, Audit) == 0


@pytest.mark.asyncio
async def test_deactivate(service):
    await service.create_obligation(create_request())

    await service.deactivate_obligation("T1")
    await service.deactivate_obligation("T1")

    obligation = await service.get_obligation("T1")
    assert obligation.active is False
    assert obligation.text == "You must give appropriate credit."
    assert obligation.classification == "green"
    assert obligation.comment == "initial"


@pytest.mark.asyncio
async def test_deactivate_unknown_topic(service):
    with pytest.raises(NotFoundError):
        await service.deactivate_obligation("missing")


@pytest.mark.asyncio
async def test_list_audits_unknown_topic(service):
    with pytest.raises(NotFoundError):
        await service.list_audits("missing", PageRequest())


@pytest.mark.asyncio
async def test_list_audits_paginates(service):
    await service.create_obligation(create_request())
    for value in (False, True, False):
        await service.update_obligation("T1", patch(active=value), "admin")

    page, total = await service.list_audits("T1", PageRequest(page=2, limit=2))

    assert total == 3
    assert len(page) == 1
    assert page[0].change_logs[0].updated_value == "false"


@pytest.mark.asyncio
async def test_update_decodes_raw_body(service):
    await service.create_obligation(create_request())

    updated = await service.update_obligation("T1", {"active": False, "comment": None}, "admin")

    assert updated.active is False
    assert updated.comment is None


@pytest.mark.asyncio
async def test_update_unknown_topic_is_reported_before_body_errors(service):
    with pytest.raises(NotFoundError):
        await service.update_obligation("missing", {"active": None, "type": 5}, "admin")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"active": 0}, {"active": "false"}, {"text_updatable": "yes"}])
async def test_update_with_wrong_typed_flag_changes_nothing(service, db_session, body):
    await service.create_obligation(create_request())

    with pytest.raises(DecodeError):
        await service.update_obligation("T1", body, "admin")

    obligation = await service.get_obligation("T1")
    assert obligation.active is True
    assert obligation.text_updatable is False
    assert await count(db_session, Audit) == 0
