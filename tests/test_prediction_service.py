from datetime import date, datetime, timezone

import pytest

from magic_ball.crud import CreateData, ReadData
from magic_ball.exceptions import StorageError
from magic_ball.models.schemas import Prediction, User
from magic_ball.services.prediction_service import PredictionService
from tests.conftest import FakeGenerator, count_rows

TELEGRAM_ID = 12345
MORNING = datetime(2024, 6, 10, 6, 0, tzinfo=timezone.utc)  # 09:00 Kyiv
EVENING = datetime(2024, 6, 10, 20, 30, tzinfo=timezone.utc)  # 23:30 Kyiv
AFTER_MIDNIGHT = datetime(2024, 6, 10, 21, 30, tzinfo=timezone.utc)  # 00:30 Kyiv, 11 June


async def test_first_request_generates_and_second_is_cached(session_factory):
    generator = FakeGenerator(["Перше передбачення", "Друге передбачення"])
    service = PredictionService(session_factory, generator)

    first = await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", MORNING)
    second = await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", EVENING)

    assert first.cached is False
    assert first.text == "Перше передбачення"
    assert first.created_at == MORNING
    assert second.cached is True
    assert second.text == first.text
    assert second.created_at == first.created_at
    assert generator.calls == ["Test"]

async def test_new_prediction_after_kyiv_midnight(session_factory):
    generator = FakeGenerator(["Вечірнє", "Нічне"])
    service = PredictionService(session_factory, generator)

    await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", EVENING)
    fresh = await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", AFTER_MIDNIGHT)
    repeat = await service.get_or_create_daily_prediction(
        TELEGRAM_ID, "Test", datetime(2024, 6, 10, 21, 31, tzinfo=timezone.utc)
    )

    assert fresh.cached is False
    assert fresh.text == "Нічне"
    assert repeat.cached is True
    assert repeat.text == "Нічне"
    assert len(generator.calls) == 2
    assert await count_rows(session_factory, Prediction) == 2

async def test_user_is_created_once_with_display_name(session_factory):
    service = PredictionService(session_factory, FakeGenerator())

    await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", MORNING)
    await service.get_or_create_daily_prediction(TELEGRAM_ID, "Other", EVENING)

    assert await count_rows(session_factory, User) == 1
    async with session_factory() as session:
        user = await ReadData.read_user(TELEGRAM_ID, session)
        assert user.first_name == "Test"

async def test_users_have_independent_predictions(session_factory):
    generator = FakeGenerator(["Для першого", "Для другого"])
    service = PredictionService(session_factory, generator)

    first = await service.get_or_create_daily_prediction(1, None, MORNING)
    second = await service.get_or_create_daily_prediction(2**63 - 1, None, MORNING)

    assert (first.text, first.cached) == ("Для першого", False)
    assert (second.text, second.cached) == ("Для другого", False)
    assert generator.calls == [None, None]

async def test_concurrently_created_user_is_reused(session_factory, monkeypatch):
    async with session_factory() as session:
        async with session.begin():
            await CreateData.create_user(TELEGRAM_ID, "Winner", session)

    original_read_user = ReadData.read_user
    calls = []

    async def read_user_missing_once(telegram_id, session):
        calls.append(telegram_id)
        if len(calls) == 1:
            return None
        return await original_read_user(telegram_id, session)

    monkeypatch.setattr(ReadData, "read_user", staticmethod(read_user_missing_once))
    service = PredictionService(session_factory, FakeGenerator())

    result = await service.get_or_create_daily_prediction(TELEGRAM_ID, "Loser", MORNING)

    assert result.cached is False
    assert len(calls) == 2
    assert await count_rows(session_factory, User) == 1

async def test_concurrently_created_prediction_is_returned_as_cached(session_factory, monkeypatch):
    async with session_factory() as session:
        async with session.begin():
            user = await CreateData.create_user(TELEGRAM_ID, "Test", session)
            await CreateData.create_prediction(
                user.user_id, "Переможець", datetime(2024, 6, 10, 5, 0), date(2024, 6, 10), session
            )

    original_read = ReadData.read_latest_prediction_since
    calls = []

    async def read_missing_once(user_id, since, session):
        calls.append(user_id)
        if len(calls) == 1:
            return None
        return await original_read(user_id, since, session)

    monkeypatch.setattr(ReadData, "read_latest_prediction_since", staticmethod(read_missing_once))
    generator = FakeGenerator(["Запізнився"])
    service = PredictionService(session_factory, generator)

    result = await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", MORNING)

    assert result.cached is True
    assert result.text == "Переможець"
    assert generator.calls == ["Test"]
    assert await count_rows(session_factory, Prediction) == 1

async def test_storage_failure_raises_storage_error(empty_session_factory):
    generator = FakeGenerator()
    service = PredictionService(empty_session_factory, generator)

    with pytest.raises(StorageError):
        await service.get_or_create_daily_prediction(TELEGRAM_ID, "Test", MORNING)
    assert generator.calls == []

async def test_naive_now_is_treated_as_utc(session_factory):
    service = PredictionService(session_factory, FakeGenerator())

    result = await service.get_or_create_daily_prediction(TELEGRAM_ID, None, datetime(2024, 6, 10, 6, 0))

    assert result.created_at == MORNING
