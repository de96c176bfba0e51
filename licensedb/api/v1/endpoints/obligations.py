"""Obligation API endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from licensedb.core.auth import get_current_user
from licensedb.core.database import get_async_session as get_session
from licensedb.schemas.audit import AuditListResponse, AuditResponse
from licensedb.schemas.auth import CurrentUser
from licensedb.schemas.common import ErrorResponse, PaginationMeta
from licensedb.schemas.obligation import (
    ObligationCreateRequest,
    ObligationListResponse,
    ObligationResponse,
)
from licensedb.services.obligation_service import ObligationService
from licensedb.utils.logging import get_logger
from licensedb.utils.pagination import PageRequest, build_pagination_meta, get_page_request

LOGGER = get_logger(__name__)

router = APIRouter()


async def get_obligation_service(
    db_session: Annotated[AsyncSession, Depends(get_session)]
) -> ObligationService:
    return ObligationService(db_session)


def _single(obligation, status_code: int) -> ObligationListResponse:
    return ObligationListResponse(
        status=status_code,
        data=[ObligationResponse.model_validate(obligation)],
        meta=PaginationMeta(resource_count=1, page=1, limit=1),
    )


@router.get(
    "",
    response_model=ObligationListResponse,
    summary="Get all active obligations",
    operation_id="get_all_obligations",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_all_obligations(
    request: Request,
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
    page: Annotated[PageRequest, Depends(get_page_request)],
    active: bool = Query(True, description="Active obligation only"),
) -> ObligationListResponse:
    """List obligations filtered by their active flag."""
    obligations, total = await obligation_service.list_obligations(active, page)
    return ObligationListResponse(
        status=status.HTTP_200_OK,
        data=[ObligationResponse.model_validate(o) for o in obligations],
        meta=build_pagination_meta(request, page, total),
    )


@router.get(
    "/{topic}",
    response_model=ObligationListResponse,
    summary="Get an obligation",
    operation_id="get_obligation",
    responses={404: {"model": ErrorResponse}},
)
async def get_obligation(
    topic: str,
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> ObligationListResponse:
    """Get an obligation by topic."""
    obligation = await obligation_service.get_obligation(topic)
    return _single(obligation, status.HTTP_200_OK)


@router.post(
    "",
    response_model=ObligationListResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an obligation",
    description="Create an obligation and associate it with licenses",
    operation_id="create_obligation",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_obligation(
    body: ObligationCreateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> ObligationListResponse:
    """Create an obligation."""
    LOGGER.info(f"User '{current_user.username}' creating obligation '{body.topic}'")
    obligation = await obligation_service.create_obligation(body)
    return _single(obligation, status.HTTP_201_CREATED)


@router.patch(
    "/{topic}",
    response_model=ObligationListResponse,
    summary="Update obligation",
    description="Update only the fields present in the body of an existing obligation",
    operation_id="update_obligation",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def update_obligation(
    topic: str,
    body: Annotated[
        dict[str, Any],
        Body(description="Fields to change; omitted keys are left untouched"),
    ],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> ObligationListResponse:
    """Partially update an obligation and record the changes.

    The body is decoded by the service after the topic lookup, so an unknown
    topic is reported as 404 whatever the body holds.
    """
    obligation = await obligation_service.update_obligation(topic, body, current_user.username)
    return _single(obligation, status.HTTP_200_OK)


@router.delete(
    "/{topic}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deactivate obligation",
    operation_id="delete_obligation",
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_obligation(
    topic: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
) -> Response:
    """Mark an obligation inactive."""
    await obligation_service.deactivate_obligation(topic)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{topic}/audits",
    response_model=AuditListResponse,
    summary="Fetches audits corresponding to an obligation",
    operation_id="get_obligation_audits",
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_obligation_audits(
    request: Request,
    topic: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    obligation_service: Annotated[ObligationService, Depends(get_obligation_service)],
    page: Annotated[PageRequest, Depends(get_page_request)],
) -> AuditListResponse:
    """List the audit trail of an obligation, newest first."""
    audits, total = await obligation_service.list_audits(topic, page)
    return AuditListResponse(
        status=status.HTTP_200_OK,
        data=[AuditResponse.model_validate(a) for a in audits],
        meta=build_pagination_meta(request, page, total),
    )
