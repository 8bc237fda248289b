from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

import pytest

from condo_backend.core.exceptions import ImportSessionNotFoundError
from condo_backend.core.utils import utc_now
from condo_backend.modules.resident_import.columns import ImportSchema
from condo_backend.modules.resident_import.registry import (
    ImportSessionRegistry,
    SessionOwner,
)
from condo_backend.modules.resident_import.session import ImportSession, ImportStage

OWNER = SessionOwner(account_id=1, company_id=1, user_id=10)


@pytest.fixture()
def registry() -> ImportSessionRegistry:
    return ImportSessionRegistry(ttl=timedelta(minutes=5))


def test_owner_gets_its_session(registry) -> None:
    session = registry.add(OWNER, ImportSession(ImportSchema.FULL))

    assert registry.get(session.id, OWNER) is session


@pytest.mark.parametrize(
    "intruder",
    [
        SessionOwner(account_id=1, company_id=1, user_id=11),
        SessionOwner(account_id=2, company_id=1, user_id=10),
    ],
)
def test_other_users_cannot_see_the_session(registry, intruder) -> None:
    session = registry.add(OWNER, ImportSession(ImportSchema.FULL))

    with pytest.raises(ImportSessionNotFoundError):
        registry.get(session.id, intruder)


def test_unknown_session(registry) -> None:
    with pytest.raises(ImportSessionNotFoundError):
        registry.get(uuid4(), OWNER)


def test_discard_resets_and_forgets(registry, directory, scenario_csv) -> None:
    session = ImportSession(ImportSchema.FULL)
    session.load(scenario_csv, directory)
    registry.add(OWNER, session)

    registry.discard(session.id, OWNER)

    assert session.stage is ImportStage.UPLOAD
    assert len(registry) == 0


def test_idle_sessions_expire_but_running_imports_stay(registry, directory, scenario_csv) -> None:
    idle = registry.add(OWNER, ImportSession(ImportSchema.FULL))
    running = ImportSession(ImportSchema.FULL)
    running.load(scenario_csv, directory)
    running.begin_import()
    registry.add(OWNER, running)

    evicted = registry.purge_expired(now=utc_now() + timedelta(minutes=6))

    assert evicted == 1
    assert registry.get(running.id, OWNER) is running
    with pytest.raises(ImportSessionNotFoundError):
        registry.get(idle.id, OWNER)
