"""Resident CSV import API routes."""

from datetime import timedelta
from typing import Annotated
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile
from fastapi.responses import StreamingResponse

from ...config import settings
from ...database import AsyncSessionLocal
from ..auth.dependencies import ManagerUser
from ..auth.schemas import AuthenticatedUser
from ..commons import BaseResponse
from . import services
from .columns import ImportSchema
from .gateway import ImportGateway
from .registry import ImportSessionRegistry, SessionOwner
from .schemas import ImportSessionResponse, RowEditRequest, RowEditResponse

router = APIRouter(prefix="/condominiums", tags=["Resident Import"])
sessions_router = APIRouter(prefix="/resident-imports", tags=["Resident Import"])

_registry = ImportSessionRegistry(
    ttl=timedelta(minutes=settings.import_session_ttl_minutes)
)


def get_session_registry() -> ImportSessionRegistry:
    return _registry


def get_import_gateway(current_user: ManagerUser) -> ImportGateway:
    return ImportGateway(
        AsyncSessionLocal, current_user.account_id, current_user.company_id
    )


def owner_of(user: AuthenticatedUser) -> SessionOwner:
    return SessionOwner(
        account_id=user.account_id, company_id=user.company_id, user_id=user.id
    )


Registry = Annotated[ImportSessionRegistry, Depends(get_session_registry)]
Gateway = Annotated[ImportGateway, Depends(get_import_gateway)]


# ----- Upload -----


@router.get("/{condominium_id}/resident-imports/template")
async def download_template(
    condominium_id: int,
    current_user: ManagerUser,
    gateway: Gateway,
    schema: ImportSchema = Query(ImportSchema.FULL),
):
    """Download an example CSV for the chosen schema."""
    template = await services.build_condominium_template(gateway, condominium_id, schema)
    return Response(
        content=template.content,
        media_type=template.media_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(template.filename)}"
            )
        },
    )


@router.post(
    "/{condominium_id}/resident-imports",
    response_model=BaseResponse[ImportSessionResponse],
)
async def upload_import_file(
    condominium_id: int,
    current_user: ManagerUser,
    gateway: Gateway,
    registry: Registry,
    file: UploadFile = File(...),
    schema: ImportSchema = Query(ImportSchema.FULL),
    apartment_id: int | None = Query(None),
):
    """Parse a resident CSV and open an import session in preview."""
    payload = await file.read()
    session = await services.open_import_session(
        gateway=gateway,
        registry=registry,
        owner=owner_of(current_user),
        condominium_id=condominium_id,
        schema=schema,
        filename=file.filename,
        payload=payload,
        apartment_id=apartment_id,
    )
    return BaseResponse(
        success=True,
        message="File parsed successfully",
        data=services.session_view(session),
    )


# ----- Preview -----


@sessions_router.get("/{session_id}", response_model=BaseResponse[ImportSessionResponse])
async def get_import_session(
    session_id: UUID,
    current_user: ManagerUser,
    registry: Registry,
):
    """Get the current state of an import session."""
    session = registry.get(session_id, owner_of(current_user))
    return BaseResponse(success=True, data=services.session_view(session))


@sessions_router.patch(
    "/{session_id}/rows/{index}", response_model=BaseResponse[RowEditResponse]
)
async def edit_import_row(
    session_id: UUID,
    index: int,
    data: RowEditRequest,
    current_user: ManagerUser,
    registry: Registry,
):
    """Change one field of a row; the row is validated again."""
    session = registry.get(session_id, owner_of(current_user))
    candidate = session.edit_field(index, data.field, data.value)
    return BaseResponse(
        success=True,
        data=RowEditResponse(
            index=index,
            candidate=candidate,
            valid_count=session.valid_count,
            invalid_count=session.invalid_count,
        ),
    )


@sessions_router.delete(
    "/{session_id}/rows/{index}", response_model=BaseResponse[ImportSessionResponse]
)
async def remove_import_row(
    session_id: UUID,
    index: int,
    current_user: ManagerUser,
    registry: Registry,
):
    """Drop a row from the import."""
    session = registry.get(session_id, owner_of(current_user))
    session.remove_row(index)
    return BaseResponse(
        success=True,
        message="Row removed",
        data=services.session_view(session),
    )


# ----- Importing -----


@sessions_router.post("/{session_id}/start")
async def start_import(
    session_id: UUID,
    current_user: ManagerUser,
    gateway: Gateway,
    registry: Registry,
):
    """Insert the valid rows one by one, streaming progress as NDJSON."""
    session = registry.get(session_id, owner_of(current_user))
    session.begin_import()
    return StreamingResponse(
        services.stream_import(session, gateway),
        media_type="application/x-ndjson",
    )


@sessions_router.post(
    "/{session_id}/cancel", response_model=BaseResponse[ImportSessionResponse]
)
async def cancel_import(
    session_id: UUID,
    current_user: ManagerUser,
    registry: Registry,
):
    """Stop a running import after the row in flight."""
    session = registry.get(session_id, owner_of(current_user))
    session.cancel()
    return BaseResponse(
        success=True,
        message="Import cancellation requested",
        data=services.session_view(session),
    )


@sessions_router.delete("/{session_id}", response_model=BaseResponse[None])
async def discard_import_session(
    session_id: UUID,
    current_user: ManagerUser,
    registry: Registry,
):
    """Reset and forget an import session."""
    registry.discard(session_id, owner_of(current_user))
    return BaseResponse(success=True, message="Import session discarded")
