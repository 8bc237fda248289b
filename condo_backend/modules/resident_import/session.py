"""Import session state machine: Upload -> Preview -> Importing -> Done."""

import asyncio
import enum
import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from ...core.exceptions import (
    EmptyFileError,
    InvalidStageError,
    NoValidRowsError,
    RemoteInsertError,
)
from ...core.logging import get_logger
from .candidates import ResidentCandidate
from .columns import COLUMNS, ImportSchema
from .directory import UnitDirectory
from .duplicates import ExistingResidentIndex
from .schemas import (
    ImportFailure,
    ImportProgress,
    ImportResults,
    NewResident,
    RowOutcome,
)
from .store import ReconciliationStore
from .tokenizer import tokenize
from .validation import ValidationContext, validate_row

logger = get_logger(__name__)

ResidentInserter = Callable[[NewResident], Awaitable[Any]]

EMAIL_ALREADY_REGISTERED = "email already registered"
DATABASE_RULE_VIOLATION = "database rule violation"
INSERT_TIMED_OUT = "insert timed out"

_DUPLICATE_MARKERS = ("duplicate", "unique constraint")
_CONSTRAINT_MARKERS = ("violates", "constraint", "foreign key")


def classify_failure(raw_reason: str) -> str:
    """Map a backend failure message to a short human readable reason."""
    lowered = raw_reason.lower()
    if any(marker in lowered for marker in _DUPLICATE_MARKERS):
        return EMAIL_ALREADY_REGISTERED
    if any(marker in lowered for marker in _CONSTRAINT_MARKERS):
        return DATABASE_RULE_VIOLATION
    return raw_reason


class ImportStage(str, enum.Enum):
    UPLOAD = "upload"
    PREVIEW = "preview"
    IMPORTING = "importing"
    DONE = "done"


class ImportSession:
    """One resident import, from file upload to the final results.

    Inserts run strictly one after another; the next row is sent only once
    the previous insert resolved. A failed row never stops the batch.
    """

    def __init__(
        self,
        schema: ImportSchema,
        condominium_id: int | None = None,
        target_apartment_id: int | None = None,
        insert_timeout: float | None = None,
        session_id: uuid.UUID | None = None,
    ):
        if schema is ImportSchema.SINGLE_UNIT and target_apartment_id is None:
            raise ValueError("single unit imports need a target apartment")

        self.id = session_id or uuid.uuid4()
        self.schema = schema
        self.condominium_id = condominium_id
        self.target_apartment_id = target_apartment_id
        self.insert_timeout = insert_timeout
        self._init_state()

    def _init_state(self) -> None:
        self.stage = ImportStage.UPLOAD
        self.source_filename: str | None = None
        self.context: ValidationContext | None = None
        self.store = ReconciliationStore((), self._revalidate, COLUMNS[self.schema])
        self.progress = ImportProgress()
        self.results = ImportResults()
        self._import_set: list[ResidentCandidate] = []
        self._import_started = False
        self._cancel_requested = False

    def _log_extra(self) -> dict[str, Any]:
        return {"import_session_id": self.id}

    def _require_stage(self, operation: str, *allowed: ImportStage) -> None:
        if self.stage not in allowed:
            raise InvalidStageError(operation, self.stage)

    def _revalidate(self, candidate: ResidentCandidate) -> ResidentCandidate:
        return self.context.validate(candidate)

    # ----- Upload -----

    def load(
        self,
        text: str,
        directory: UnitDirectory,
        existing: ExistingResidentIndex | None = None,
        filename: str | None = None,
    ) -> list[ResidentCandidate]:
        """Parse and validate the file text, moving to Preview on success.

        Choosing a new file during Preview discards the previous one first.

        Raises:
            EmptyFileError: No usable data line; the session stays in Upload.
        """
        self._require_stage("load a file", ImportStage.UPLOAD, ImportStage.PREVIEW)
        if self.stage is ImportStage.PREVIEW:
            self.reset()

        context = ValidationContext(
            schema=self.schema,
            directory=directory,
            existing=existing or ExistingResidentIndex(),
            target_apartment_id=self.target_apartment_id,
        )
        candidates = [
            validate_row(row.values, context, line_number=row.line_number)
            for row in tokenize(text, self.schema)
        ]
        if not candidates:
            raise EmptyFileError()

        self.context = context
        self.source_filename = filename
        self.store = ReconciliationStore(
            candidates, self._revalidate, COLUMNS[self.schema]
        )
        self.stage = ImportStage.PREVIEW

        logger.info(
            "Import file parsed: %d row(s), %d valid, %d invalid",
            len(self.store),
            self.store.valid_count,
            self.store.invalid_count,
            extra=self._log_extra(),
        )
        return list(self.store)

    # ----- Preview -----

    def edit_field(self, index: int, field: str, value: str | bool | None) -> ResidentCandidate:
        self._require_stage("edit rows", ImportStage.PREVIEW)
        return self.store.edit_field(index, field, value)

    def remove_row(self, index: int) -> ResidentCandidate:
        self._require_stage("remove rows", ImportStage.PREVIEW)
        return self.store.remove_row(index)

    @property
    def candidates(self) -> list[ResidentCandidate]:
        return list(self.store)

    @property
    def valid_count(self) -> int:
        return self.store.valid_count

    @property
    def invalid_count(self) -> int:
        return self.store.invalid_count

    @property
    def can_start_import(self) -> bool:
        return self.stage is ImportStage.PREVIEW and self.valid_count > 0

    def begin_import(self) -> list[ResidentCandidate]:
        """Freeze the import set and move to Importing.

        Raises:
            NoValidRowsError: Nothing to import; the session stays in Preview.
        """
        self._require_stage("start the import", ImportStage.PREVIEW)

        import_set = self.store.import_set()
        if not import_set:
            raise NoValidRowsError()

        self._import_set = import_set
        self.progress = ImportProgress(current=0, total=len(import_set))
        self.results = ImportResults()
        self.stage = ImportStage.IMPORTING

        logger.info(
            "Import started for %d row(s)", len(import_set), extra=self._log_extra()
        )
        return list(import_set)

    # ----- Importing -----

    async def _attempt(
        self, insert: ResidentInserter, candidate: ResidentCandidate
    ) -> RowOutcome:
        payload = NewResident.from_candidate(candidate)
        try:
            if self.insert_timeout:
                await asyncio.wait_for(insert(payload), timeout=self.insert_timeout)
            else:
                await insert(payload)
        except asyncio.TimeoutError:
            reason = INSERT_TIMED_OUT
        except RemoteInsertError as exc:
            reason = classify_failure(exc.message)
        except Exception as exc:
            logger.exception("Unexpected insert error", extra=self._log_extra())
            reason = classify_failure(str(exc) or type(exc).__name__)
        else:
            return RowOutcome(candidate=candidate, success=True)

        logger.warning(
            "Resident insert failed on line %s: %s",
            candidate.line_number,
            reason,
            extra=self._log_extra(),
        )
        return RowOutcome(candidate=candidate, success=False, reason=reason)

    def _record(self, outcome: RowOutcome) -> None:
        if outcome.success:
            self.results.success_count += 1
        else:
            self.results.failed_count += 1
            self.results.failures.append(
                ImportFailure(candidate=outcome.candidate, reason=outcome.reason)
            )
        self.progress = ImportProgress(
            current=self.progress.current + 1,
            total=self.progress.total,
            last_result=outcome,
        )

    def _finish(self) -> None:
        self.results.skipped_count = self.progress.total - self.progress.current
        self.stage = ImportStage.DONE
        logger.info(
            "Import finished: %d imported, %d failed, %d skipped",
            self.results.success_count,
            self.results.failed_count,
            self.results.skipped_count,
            extra=self._log_extra(),
        )

    async def run_import(self, insert: ResidentInserter) -> AsyncIterator[ImportProgress]:
        """Insert every row of the import set, yielding progress after each.

        The sequence can only be consumed once; starting over requires a
        reset. If the consumer stops early, rows never attempted are counted
        as skipped and the session still lands in Done.
        """
        self._require_stage("run the import", ImportStage.IMPORTING)
        if self._import_started:
            raise InvalidStageError("run the import again", self.stage)
        self._import_started = True

        try:
            for candidate in self._import_set:
                if self._cancel_requested:
                    logger.info("Import cancelled", extra=self._log_extra())
                    break
                self._record(await self._attempt(insert, candidate))
                yield self.progress
        finally:
            if self.stage is ImportStage.IMPORTING:
                self._finish()

    async def import_all(self, insert: ResidentInserter) -> ImportResults:
        """Start the import and drive it to completion."""
        self.begin_import()
        async for _ in self.run_import(insert):
            pass
        return self.results

    def cancel(self) -> None:
        """Stop issuing inserts once the in-flight one resolves."""
        self._require_stage("cancel", ImportStage.IMPORTING)
        self._cancel_requested = True
        if not self._import_started:
            self._import_started = True
            self._finish()

    # ----- Done -----

    def reset(self) -> None:
        """Clear everything and return to Upload."""
        self._require_stage(
            "reset", ImportStage.UPLOAD, ImportStage.PREVIEW, ImportStage.DONE
        )
        self._init_state()
        logger.debug("Import session reset", extra=self._log_extra())
