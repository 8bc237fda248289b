"""Editable set of parsed candidates shown for review before importing."""

from collections.abc import Callable, Iterable, Iterator

from ...core.exceptions import RowIndexError, ValidationError
from ...core.logging import get_logger
from .candidates import EDITABLE_FIELDS, FLAG_FIELDS, ResidentCandidate
from .validation import parse_flag

logger = get_logger(__name__)

RowValidator = Callable[[ResidentCandidate], ResidentCandidate]


class ReconciliationStore:
    """Ordered candidate list; every edit re-runs the full row validation.

    Only ``editable_fields`` can change, normally the columns of the import
    layout the rows were read with.
    """

    def __init__(
        self,
        candidates: Iterable[ResidentCandidate],
        validator: RowValidator,
        editable_fields: Iterable[str] = EDITABLE_FIELDS,
    ):
        self._candidates: list[ResidentCandidate] = list(candidates)
        self._validator = validator
        self._editable_fields = frozenset(editable_fields) & EDITABLE_FIELDS

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[ResidentCandidate]:
        return iter(tuple(self._candidates))

    def __getitem__(self, index: int) -> ResidentCandidate:
        return self._candidates[self._check_index(index)]

    @property
    def candidates(self) -> tuple[ResidentCandidate, ...]:
        return tuple(self._candidates)

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._candidates):
            raise RowIndexError(index)
        return index

    def edit_field(
        self, index: int, field: str, value: str | bool | None
    ) -> ResidentCandidate:
        """Replace one field and re-validate the whole row."""
        self._check_index(index)
        if field not in self._editable_fields:
            raise ValidationError(
                "field cannot be edited in this import layout", field=field, value=value
            )

        if field in FLAG_FIELDS:
            new_value: str | bool = parse_flag(value)
        else:
            new_value = "" if value is None else str(value)

        edited = self._candidates[index].model_copy(update={field: new_value})
        revalidated = self._validator(edited)
        self._candidates[index] = revalidated

        logger.debug(
            "Row %d field %s edited, %d error(s)", index, field, len(revalidated.errors)
        )
        return revalidated

    def remove_row(self, index: int) -> ResidentCandidate:
        """Delete a row; later rows shift up unchanged."""
        removed = self._candidates.pop(self._check_index(index))
        logger.debug("Row %d removed, %d row(s) left", index, len(self._candidates))
        return removed

    @property
    def valid_count(self) -> int:
        return sum(1 for candidate in self._candidates if candidate.is_valid)

    @property
    def invalid_count(self) -> int:
        return sum(1 for candidate in self._candidates if not candidate.is_valid)

    def import_set(self) -> list[ResidentCandidate]:
        """Point-in-time snapshot of the rows that will be inserted."""
        return [
            candidate
            for candidate in self._candidates
            if candidate.is_valid and candidate.resolved_apartment_id is not None
        ]
