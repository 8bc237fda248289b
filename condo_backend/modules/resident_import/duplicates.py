"""Detection of residents already registered on a unit."""

from collections.abc import Iterable

from .candidates import ResidentCandidate, RowError


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class ExistingResidentIndex:
    """(apartment id, normalized email) pairs already on file."""

    def __init__(self, pairs: Iterable[tuple[int, str | None]] = ()):
        self._keys: frozenset[tuple[int, str]] = frozenset(
            (apartment_id, normalize_email(email))
            for apartment_id, email in pairs
            if normalize_email(email)
        )

    def contains(self, apartment_id: int, email: str) -> bool:
        return (apartment_id, normalize_email(email)) in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __bool__(self) -> bool:
        return bool(self._keys)


def mark_duplicate(
    candidate: ResidentCandidate, existing: ExistingResidentIndex
) -> ResidentCandidate:
    """Flag the candidate when its (unit, email) pair is already registered.

    Rows without a resolved unit or without an email are returned untouched,
    which makes the check a no-op for layouts that carry no email column.
    """
    if candidate.resolved_apartment_id is None or not normalize_email(candidate.email):
        return candidate
    if not existing.contains(candidate.resolved_apartment_id, candidate.email):
        return candidate
    return candidate.model_copy(
        update={"errors": [*candidate.errors, RowError.DUPLICATE_RESIDENT.value]}
    )
