"""Resident import business logic services."""

import json
import os
from collections.abc import AsyncIterator

from ...config import settings
from ...core.exceptions import FileFormatError, ValidationError
from ...core.logging import get_logger
from .columns import ImportSchema, has_email
from .duplicates import ExistingResidentIndex
from .gateway import ImportGateway
from .registry import ImportSessionRegistry, SessionOwner
from .schemas import ImportSessionResponse
from .session import ImportSession
from .templates import ImportTemplate, build_template

logger = get_logger(__name__)


def check_upload(filename: str | None, payload: bytes) -> str:
    """Validate the uploaded file and return its text.

    Raises:
        FileFormatError: Wrong extension, oversize file or undecodable bytes.
    """
    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in settings.import_allowed_extensions:
        raise FileFormatError(filename=filename)

    if len(payload) > settings.import_max_file_bytes:
        raise FileFormatError(
            f"File is larger than {settings.import_max_file_bytes} bytes",
            filename=filename,
        )

    try:
        # utf-8-sig drops the BOM spreadsheet tools put in front of CSV exports
        return payload.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FileFormatError(
            "File is not UTF-8 encoded text", filename=filename
        ) from exc


async def open_import_session(
    gateway: ImportGateway,
    registry: ImportSessionRegistry,
    owner: SessionOwner,
    condominium_id: int,
    schema: ImportSchema,
    filename: str | None,
    payload: bytes,
    apartment_id: int | None = None,
) -> ImportSession:
    """Parse an uploaded file into a new session in Preview."""
    text = check_upload(filename, payload)

    directory = await gateway.load_directory(condominium_id)
    if schema is ImportSchema.SINGLE_UNIT:
        if apartment_id is None:
            raise ValidationError("required for single unit imports", field="apartment_id")
        if directory.get_apartment(apartment_id) is None:
            raise ValidationError(
                "apartment does not belong to this condominium",
                field="apartment_id",
                value=apartment_id,
            )

    if has_email(schema):
        existing = await gateway.load_existing_index(directory.apartment_ids)
    else:
        existing = ExistingResidentIndex()

    session = ImportSession(
        schema,
        condominium_id=condominium_id,
        target_apartment_id=apartment_id,
        insert_timeout=settings.import_insert_timeout_seconds,
    )
    session.load(text, directory, existing, filename=filename)
    registry.add(owner, session)

    logger.info(
        "Import session opened for condominium %s by user %s",
        condominium_id,
        owner.user_id,
        extra={"import_session_id": session.id},
    )
    return session


async def build_condominium_template(
    gateway: ImportGateway, condominium_id: int, schema: ImportSchema
) -> ImportTemplate:
    name = await gateway.get_condominium_name(condominium_id)
    directory = (
        await gateway.load_directory(condominium_id)
        if schema is ImportSchema.FULL
        else None
    )
    return build_template(schema, name, directory)


def session_view(session: ImportSession) -> ImportSessionResponse:
    return ImportSessionResponse(
        session_id=session.id,
        condominium_id=session.condominium_id,
        schema_variant=session.schema,
        stage=session.stage.value,
        source_filename=session.source_filename,
        candidates=session.candidates,
        valid_count=session.valid_count,
        invalid_count=session.invalid_count,
        progress=session.progress,
        results=session.results,
    )


async def stream_import(
    session: ImportSession, gateway: ImportGateway
) -> AsyncIterator[str]:
    """Drive an import that already began, as NDJSON progress lines.

    One ``progress`` line per attempted row, then one ``done`` line with the
    final results.
    """
    async for progress in session.run_import(gateway.insert_resident):
        yield json.dumps(
            {"event": "progress", **progress.model_dump(mode="json")}
        ) + "\n"
    yield json.dumps(
        {"event": "done", **session.results.model_dump(mode="json")}
    ) + "\n"
