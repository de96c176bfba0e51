"""Obligation service for business logic operations.

This module owns the obligation rules (uniqueness of topic and text,
the text update policy, soft deletion) and the transaction boundaries,
acting as an intermediary between repositories and API endpoints.
"""

import hashlib
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.core.exceptions import (
    AppError,
    ConflictError,
    DatabaseError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from licensedb.database.models import AUDIT_TYPE_OBLIGATION, Audit, Obligation
from licensedb.repositories.audit_repository import AuditRepository
from licensedb.repositories.license_repository import LicenseRepository
from licensedb.repositories.obligation_repository import (
    FieldUpdate,
    ObligationField,
    ObligationRepository,
)
from licensedb.repositories.user_repository import UserRepository
from licensedb.schemas.obligation import ObligationCreateRequest, ObligationPatchRequest
from licensedb.services.change_tracker import ObligationSnapshot, diff_obligations
from licensedb.utils.logging import get_logger
from licensedb.utils.pagination import PageRequest

LOGGER = get_logger(__name__)


def text_digest(text: str) -> str:
    """Hex MD5 digest of an obligation text, used to detect duplicates."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def plan_updates(
    current: ObligationSnapshot, request: ObligationPatchRequest
) -> list[FieldUpdate]:
    """Turn a partial update request into the list of fields to write.

    Only fields present in the request are listed. Booleans are written
    whenever they are sent, even if unchanged.

    Raises:
        ValidationError: If the request breaks the update policy
    """
    updates: list[FieldUpdate] = []

    new_text = request.text.get("")
    if new_text and new_text != current.text:
        if not current.text_updatable:
            raise ValidationError("Can not update obligation text")
        updates.append((ObligationField.TEXT, new_text))
        updates.append((ObligationField.MD5, text_digest(new_text)))

    if request.type.is_defined:
        if request.type.value == "":
            raise ValidationError("Type cannot be an empty string")
        updates.append((ObligationField.TYPE, request.type.value))

    if request.classification.is_defined:
        if request.classification.value == "":
            raise ValidationError("Classification cannot be an empty string")
        updates.append((ObligationField.CLASSIFICATION, request.classification.value))

    if request.modifications.is_defined:
        updates.append((ObligationField.MODIFICATIONS, request.modifications.value))

    if request.comment.is_defined:
        # null clears the comment
        updates.append((ObligationField.COMMENT, request.comment.get()))

    if request.active.is_defined:
        updates.append((ObligationField.ACTIVE, request.active.value))

    if request.text_updatable.is_defined:
        updates.append((ObligationField.TEXT_UPDATABLE, request.text_updatable.value))

    return updates


class ObligationService:
    """Service for obligation business logic operations."""

    def __init__(self, session: AsyncSession):
        """Initialize service with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session
        self.obligations = ObligationRepository(session)
        self.licenses = LicenseRepository(session)
        self.users = UserRepository(session)
        self.audits = AuditRepository(session)
        self.logger = LOGGER

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[None]:
        """Commit the wrapped block, or roll all of it back on any error."""
        try:
            yield
            await self.session.commit()
        except AppError:
            await self.session.rollback()
            raise
        except IntegrityError as e:
            await self.session.rollback()
            self.logger.warning(f"Uniqueness violation while trying to {action}: {e.orig}")
            raise ConflictError(
                f"Failed to {action}",
                original_error=e,
                detail="obligation with same topic or text already exists",
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error(f"Failed to {action}: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to {action}", original_error=e) from e

    async def _require_by_topic(self, topic: str) -> Obligation:
        obligation = await self.obligations.get_by_topic(topic)
        if obligation is None:
            raise NotFoundError(f"obligation with topic '{topic}' not found")
        return obligation

    async def list_obligations(
        self, active: bool, page: PageRequest
    ) -> tuple[list[Obligation], int]:
        """List obligations by active flag.

        Returns:
            One page of obligations and the total number of matches; an
            empty page is a valid result
        """
        try:
            return await self.obligations.list_by_active(active, page.offset, page.limit)
        except SQLAlchemyError as e:
            raise NotFoundError("Obligations not found", original_error=e) from e

    async def get_obligation(self, topic: str) -> Obligation:
        """Get an obligation by topic.

        Raises:
            NotFoundError: If no obligation has this topic
        """
        return await self._require_by_topic(topic)

    async def create_obligation(self, request: ObligationCreateRequest) -> Obligation:
        """Create an obligation and link it to the named licenses.

        Shortnames that match no license are skipped.

        Raises:
            ConflictError: If an obligation with the same topic or text exists
        """
        md5 = text_digest(request.text)

        async with self._transaction("create obligation"):
            existing = await self.obligations.get_by_topic_or_md5(request.topic, md5)
            if existing is not None:
                self.logger.warning(
                    f"Rejected obligation '{request.topic}': topic or text already used by "
                    f"'{existing.topic}'"
                )
                raise ConflictError(
                    "can not create obligation with same topic or text",
                    detail=(
                        f"Error: Obligation with topic '{request.topic}' or Text "
                        f"'{request.text[:10]}'... already exists"
                    ),
                )

            obligation = await self.obligations.create(
                topic=request.topic,
                type=request.type,
                text=request.text,
                classification=request.classification,
                comment=request.comment.to_wire(),
                modifications=request.modifications,
                active=request.active,
                text_updatable=False,
                md5=md5,
            )

            for shortname in dict.fromkeys(request.shortnames):
                linked_license = await self.licenses.get_by_shortname(shortname)
                if linked_license is None:
                    self.logger.warning(
                        f"License '{shortname}' not found, obligation '{request.topic}' not linked"
                    )
                    continue
                await self.obligations.link_license(obligation.id, linked_license.id)

        self.logger.info(f"Created obligation {obligation.id} with topic '{obligation.topic}'")
        return obligation

    async def update_obligation(
        self,
        topic: str,
        changes: Union[ObligationPatchRequest, Mapping[str, Any]],
        username: str,
    ) -> Obligation:
        """Apply a partial update and record the changed fields in one transaction.

        Args:
            topic: Topic of the obligation to update
            changes: Partial update, either decoded or the raw JSON object;
                a raw object is decoded only once the topic is known to exist
            username: User performing the update

        Returns:
            The updated obligation

        Raises:
            NotFoundError: If no obligation has this topic
            DecodeError: If a field of the raw object has the wrong type or
                is a forbidden null
            ValidationError: If the request breaks the update policy
            InternalError: If the acting user is unknown
        """
        async with self._transaction("update obligation"):
            obligation = await self._require_by_topic(topic)
            request = (
                changes
                if isinstance(changes, ObligationPatchRequest)
                else ObligationPatchRequest.decode(changes)
            )
            before = ObligationSnapshot.from_model(obligation)

            try:
                updates = plan_updates(before, request)
            except ValidationError:
                self.logger.warning(f"Rejected update of obligation '{topic}'")
                raise

            await self.obligations.apply_updates(obligation, updates)

            user = await self.users.get_by_username(username)
            if user is None:
                raise InternalError(
                    "Failed to update obligation",
                    detail=f"user '{username}' not found",
                )

            changes = diff_obligations(before, ObligationSnapshot.from_model(obligation))
            if changes:
                await self.audits.create_audit(
                    user_id=user.id,
                    type_id=obligation.id,
                    type=AUDIT_TYPE_OBLIGATION,
                    changes=changes,
                )

        self.logger.info(
            f"Updated obligation '{topic}' by '{username}' with {len(changes)} change(s)"
        )
        return obligation

    async def deactivate_obligation(self, topic: str) -> None:
        """Mark an obligation inactive; the row itself is kept.

        Raises:
            NotFoundError: If no obligation has this topic
        """
        async with self._transaction("deactivate obligation"):
            obligation = await self._require_by_topic(topic)
            await self.obligations.apply_updates(obligation, [(ObligationField.ACTIVE, False)])

        self.logger.info(f"Deactivated obligation '{topic}'")

    async def list_audits(self, topic: str, page: PageRequest) -> tuple[list[Audit], int]:
        """List the audits recorded for an obligation.

        Raises:
            NotFoundError: If no obligation has this topic
            InternalError: If the audits cannot be read
        """
        obligation = await self._require_by_topic(topic)
        try:
            return await self.audits.list_for_entity(
                obligation.id, AUDIT_TYPE_OBLIGATION, page.offset, page.limit
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Failed to read audits of '{topic}': {str(e)}", exc_info=True)
            raise InternalError(
                "unable to find audits with such obligation topic", original_error=e
            ) from e
