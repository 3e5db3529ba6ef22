"""
Workout ledger tests: set logging through the service and POST /api/sets.

Covers:
- first set opens a workout and is a PR; a lighter second set reuses it
- one open workout per user/day, dense set numbers, under concurrent submission
- PR rows only appended when the weight beats the running max
- rollback of every write when a later step fails
- retry on write conflicts and StoreError once attempts run out
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError

from gymtracker.core.config import Settings
from gymtracker.core.errors import StoreError
from gymtracker.models import ExerciseSet, PersonalRecord, Workout, WorkoutExercise
from gymtracker.schemas.workout import SetCreate
from gymtracker.services import ledger
from gymtracker.services.ledger import is_retryable_conflict, log_set, retry_delay

pytestmark = pytest.mark.integration


def _conflict(message: str = "database is locked") -> DBAPIError:
    return DBAPIError("INSERT INTO exercise_sets ...", {}, Exception(message))


async def _count(session_factory, model, *where) -> int:
    async with session_factory() as db:
        result = await db.execute(select(func.count()).select_from(model).where(*where))
        return result.scalar_one()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_first_set_opens_workout_and_is_personal_record(client, user, catalog):
    response = await client.post(
        "/api/sets",
        json={"user_id": user.id, "exercise_id": catalog["bench_press"], "weight": 100, "reps": 5},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["set_number"] == 1
    assert data["is_personal_record"] is True
    assert data["workout_id"] > 0
    assert data["workout_exercise_id"] > 0


@pytest.mark.asyncio
async def test_lighter_second_set_reuses_workout_and_is_not_pr(client, user, catalog):
    first = await client.post(
        "/api/sets",
        json={"user_id": user.id, "exercise_id": catalog["bench_press"], "weight": 100, "reps": 5},
    )
    second = await client.post(
        "/api/sets",
        json={"user_id": user.id, "exercise_id": catalog["bench_press"], "weight": 90, "reps": 8},
    )

    assert second.status_code == 200
    assert second.json()["workout_id"] == first.json()["workout_id"]
    assert second.json()["workout_exercise_id"] == first.json()["workout_exercise_id"]
    assert second.json()["set_number"] == 2
    assert second.json()["is_personal_record"] is False


@pytest.mark.asyncio
async def test_log_set_with_equipment_from_tag_scan(client, user, catalog):
    response = await client.post(
        "/api/sets",
        json={
            "user_id": user.id,
            "exercise_id": catalog["bench_press"],
            "equipment_id": "BP001",
            "weight": 60,
            "reps": 10,
            "notes": "warm-up",
        },
    )

    assert response.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"exercise_id": 1, "weight": 100},
        {"user_id": 1, "weight": 100},
        {"user_id": 1, "exercise_id": 1},
        {"user_id": 1, "exercise_id": 1, "weight": 0},
        {"user_id": 1, "exercise_id": 1, "weight": "heavy"},
        {"user_id": 1, "exercise_id": 1, "weight": 50, "reps": -1},
    ],
)
async def test_invalid_set_payload_returns_400(client, payload):
    response = await client.post("/api/sets", json=payload)

    assert response.status_code == 400
    assert "error" in response.json()


@pytest.mark.asyncio
async def test_unknown_references_return_404(client, user, catalog):
    unknown_user = await client.post(
        "/api/sets", json={"user_id": 9999, "exercise_id": catalog["bench_press"], "weight": 50}
    )
    unknown_exercise = await client.post(
        "/api/sets", json={"user_id": user.id, "exercise_id": 9999, "weight": 50}
    )
    unknown_equipment = await client.post(
        "/api/sets",
        json={"user_id": user.id, "exercise_id": catalog["bench_press"], "equipment_id": "NOPE", "weight": 50},
    )

    assert unknown_user.status_code == 404
    assert unknown_exercise.status_code == 404
    assert unknown_equipment.status_code == 404


# ---------------------------------------------------------------------------
# Service invariants
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_sets_on_two_exercises_share_one_open_workout(session_factory, user, catalog):
    settings = Settings()
    bench = await log_set(
        session_factory,
        SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=80, reps=5),
        settings,
    )
    squat = await log_set(
        session_factory,
        SetCreate(user_id=user.id, exercise_id=catalog["squat"], weight=120, reps=5),
        settings,
    )

    assert bench.workout_id == squat.workout_id
    assert bench.workout_exercise_id != squat.workout_exercise_id
    assert squat.set_number == 1
    assert await _count(session_factory, Workout, Workout.user_id == user.id) == 1


@pytest.mark.asyncio
async def test_closed_workout_is_not_reused(session_factory, client, user, catalog):
    settings = Settings()
    payload = SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=80, reps=5)
    first = await log_set(session_factory, payload, settings)

    ended = await client.post(f"/api/workouts/{first.workout_id}/end")
    second = await log_set(session_factory, payload, settings)

    assert ended.status_code == 200
    assert second.workout_id != first.workout_id
    assert second.set_number == 1
    assert await _count(session_factory, Workout, Workout.end_time.is_(None)) == 1


@pytest.mark.asyncio
async def test_concurrent_submissions_keep_one_workout_and_dense_numbers(session_factory, user, catalog):
    settings = Settings(ledger_max_attempts=10)
    payloads = [
        SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=50 + i, reps=5)
        for i in range(4)
    ]

    results = await asyncio.gather(*(log_set(session_factory, p, settings) for p in payloads))

    assert len({r.workout_id for r in results}) == 1
    assert len({r.workout_exercise_id for r in results}) == 1
    assert sorted(r.set_number for r in results) == [1, 2, 3, 4]
    assert await _count(session_factory, Workout, Workout.user_id == user.id) == 1
    assert await _count(session_factory, WorkoutExercise) == 1
    assert await _count(session_factory, ExerciseSet) == 4


@pytest.mark.asyncio
async def test_personal_records_only_grow(session_factory, user, catalog):
    settings = Settings()
    flags = []
    for weight in (100, 90, 100, 105, 102.5, 110):
        logged = await log_set(
            session_factory,
            SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=weight, reps=3),
            settings,
        )
        flags.append(logged.is_personal_record)

    async with session_factory() as db:
        values = (
            await db.execute(
                select(PersonalRecord.value)
                .where(PersonalRecord.user_id == user.id)
                .order_by(PersonalRecord.date_achieved, PersonalRecord.id)
            )
        ).scalars().all()

    assert flags == [True, False, False, True, False, True]
    assert values == [100.0, 105.0, 110.0]


@pytest.mark.asyncio
async def test_personal_records_are_per_user(session_factory, user, other_user, catalog):
    settings = Settings()
    await log_set(
        session_factory,
        SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=140),
        settings,
    )
    other = await log_set(
        session_factory,
        SetCreate(user_id=other_user.id, exercise_id=catalog["bench_press"], weight=60),
        settings,
    )

    assert other.is_personal_record is True


@pytest.mark.asyncio
async def test_failure_after_inserts_rolls_back_everything(session_factory, user, catalog, monkeypatch):
    async def broken_pr_check(*args, **kwargs):
        raise RuntimeError("PR check failed")

    monkeypatch.setattr(ledger, "record_personal_record_if_greater", broken_pr_check)

    with pytest.raises(RuntimeError):
        await log_set(
            session_factory,
            SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=100),
            Settings(),
        )

    assert await _count(session_factory, Workout) == 0
    assert await _count(session_factory, WorkoutExercise) == 0
    assert await _count(session_factory, ExerciseSet) == 0
    assert await _count(session_factory, PersonalRecord) == 0


# ---------------------------------------------------------------------------
# Retry policy
# ---------------------------------------------------------------------------

@pytest.mark.unit
def test_is_retryable_conflict_recognises_sqlstates_and_sqlite_messages():
    class PgError(Exception):
        sqlstate = "40001"

    assert is_retryable_conflict(DBAPIError("stmt", {}, PgError("could not serialize access")))
    assert is_retryable_conflict(_conflict("UNIQUE constraint failed: exercise_sets.set_number"))
    assert is_retryable_conflict(_conflict("database is locked"))
    assert not is_retryable_conflict(_conflict("no such table: workouts"))


@pytest.mark.asyncio
async def test_conflict_is_retried(session_factory, user, catalog, monkeypatch):
    real_once = ledger._log_set_once
    calls = []

    async def flaky_once(*args, **kwargs):
        calls.append(1)
        if len(calls) == 1:
            raise _conflict()
        return await real_once(*args, **kwargs)

    monkeypatch.setattr(ledger, "_log_set_once", flaky_once)

    logged = await log_set(
        session_factory,
        SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=70),
        Settings(ledger_max_attempts=3),
    )

    assert len(calls) == 2
    assert logged.set_number == 1


@pytest.mark.asyncio
async def test_persistent_conflict_becomes_store_error(session_factory, monkeypatch):
    calls = []
    pauses = []

    async def always_conflicts(*args, **kwargs):
        calls.append(1)
        raise _conflict()

    monkeypatch.setattr(ledger, "_log_set_once", always_conflicts)
    monkeypatch.setattr(
        ledger, "retry_delay", lambda attempt, backoff: pauses.append((attempt, backoff)) or 0
    )

    with pytest.raises(StoreError):
        await log_set(
            session_factory,
            SetCreate(user_id=1, exercise_id=1, weight=70),
            Settings(ledger_max_attempts=3, ledger_retry_backoff_seconds=0.01),
        )
    assert len(calls) == 3
    assert pauses == [(1, 0.01), (2, 0.01)]


@pytest.mark.asyncio
async def test_non_conflict_store_failure_is_not_retried(session_factory, monkeypatch):
    calls = []

    async def broken_store(*args, **kwargs):
        calls.append(1)
        raise _conflict("disk I/O error")

    monkeypatch.setattr(ledger, "_log_set_once", broken_store)

    with pytest.raises(StoreError) as exc_info:
        await log_set(session_factory, SetCreate(user_id=1, exercise_id=1, weight=70), Settings())

    assert len(calls) == 1
    assert exc_info.value.status_code == 500


@pytest.mark.unit
def test_retry_delay_grows_with_jitter():
    for attempt in (1, 2, 3):
        base = 0.05 * 2 ** (attempt - 1)
        delays = [retry_delay(attempt, 0.05) for _ in range(50)]
        assert all(0.5 * base <= d <= 1.5 * base for d in delays)
    assert retry_delay(1, 0) == 0


@pytest.mark.asyncio
async def test_slow_attempt_times_out(session_factory, monkeypatch):
    async def stalls(*args, **kwargs):
        await asyncio.sleep(5)

    monkeypatch.setattr(ledger, "_log_set_once", stalls)

    with pytest.raises(StoreError) as exc_info:
        await log_set(
            session_factory,
            SetCreate(user_id=1, exercise_id=1, weight=70),
            Settings(ledger_transaction_timeout_seconds=0.05),
        )

    assert exc_info.value.message == "Set logging timed out"


@pytest.mark.asyncio
async def test_burst_with_default_settings_logs_every_set(session_factory, user, catalog):
    payloads = [
        SetCreate(user_id=user.id, exercise_id=catalog["bench_press"], weight=40 + i, reps=10)
        for i in range(8)
    ]

    results = await asyncio.gather(*(log_set(session_factory, p, Settings()) for p in payloads))

    assert len({r.workout_id for r in results}) == 1
    assert sorted(r.set_number for r in results) == list(range(1, 9))
    assert await _count(session_factory, ExerciseSet) == 8
    assert await _count(session_factory, Workout, Workout.end_time.is_(None)) == 1
