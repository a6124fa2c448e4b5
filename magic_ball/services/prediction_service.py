"""DB service layer for the daily prediction use case.

- Routers should not touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries.
- Duplicate users and same-day predictions are prevented by unique
  constraints in the database, not by locks in this process.
"""

import logging
from datetime import datetime

import pytz
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from magic_ball.crud import CreateData, ReadData
from magic_ball.domain.daily_boundary import as_utc, kyiv_day, start_of_kyiv_day
from magic_ball.exceptions import StorageError
from magic_ball.models.dc_models import DailyPredictionModel
from magic_ball.models.schema_models import PredictionSchema, UserSchema
from magic_ball.services.generator import PredictionGenerator


def _naive_utc(moment: datetime) -> datetime:
    return as_utc(moment).replace(tzinfo=None)


def _to_daily_prediction(prediction: PredictionSchema, cached: bool) -> DailyPredictionModel:
    return DailyPredictionModel(
        text=prediction.text,
        created_at=pytz.utc.localize(prediction.created_at),
        cached=cached,
    )


class PredictionService:
    def __init__(self, Session: async_sessionmaker, generator: PredictionGenerator):
        self.Session: async_sessionmaker = Session
        self.generator: PredictionGenerator = generator

    async def get_or_create_daily_prediction(
        self,
        telegram_id: int,
        first_name: str | None = None,
        now: datetime | None = None,
    ) -> DailyPredictionModel:
        """Return today's prediction for the user, generating it on the first request of the Kyiv day

        Args:
            telegram_id (int): Telegram user id, already validated
            first_name (str | None, optional): Display name for a new user and the prompt. Defaults to None.
            now (datetime | None, optional): Current instant. Defaults to the current UTC time.

        Raises:
            StorageError: The database failed; nothing was committed

        Returns:
            DailyPredictionModel: Prediction text, creation time and whether it was cached
        """
        now = as_utc(now or datetime.now(pytz.utc))
        start_of_today = _naive_utc(start_of_kyiv_day(now))

        try:
            async with self.Session() as session:
                user = await self._resolve_user(session, telegram_id, first_name)

                async with session.begin():
                    existing = await ReadData.read_latest_prediction_since(
                        user.user_id, start_of_today, session
                    )
                    if existing is not None:
                        logging.debug(f"Cached prediction for telegram_id={telegram_id}")
                        return _to_daily_prediction(PredictionSchema.model_validate(existing), True)

                # Generation may wait on the network, so no transaction is held open here.
                text = await self.generator.generate(first_name)
                return await self._store_prediction(session, user, text, now, start_of_today)
        except SQLAlchemyError as e:
            logging.error(f"Failed to get or create daily prediction: {e}")
            raise StorageError(str(e)) from e

    async def _resolve_user(
        self, session: AsyncSession, telegram_id: int, first_name: str | None
    ) -> UserSchema:
        try:
            async with session.begin():
                user = await ReadData.read_user(telegram_id, session)
                if user is None:
                    user = await CreateData.create_user(telegram_id, first_name, session)
                    logging.info(f"Created user telegram_id={telegram_id}")
                return UserSchema.model_validate(user)
        except IntegrityError:
            logging.info(f"User telegram_id={telegram_id} was created concurrently, reading it")

        async with session.begin():
            user = await ReadData.read_user(telegram_id, session)
            if user is None:
                raise StorageError(f"User telegram_id={telegram_id} vanished after conflict")
            return UserSchema.model_validate(user)

    async def _store_prediction(
        self,
        session: AsyncSession,
        user: UserSchema,
        text: str,
        now: datetime,
        start_of_today: datetime,
    ) -> DailyPredictionModel:
        try:
            async with session.begin():
                prediction = await CreateData.create_prediction(
                    user.user_id, text, _naive_utc(now), kyiv_day(now), session
                )
                return _to_daily_prediction(PredictionSchema.model_validate(prediction), False)
        except IntegrityError:
            logging.info(f"Prediction for user_id={user.user_id} was created concurrently, reading it")

        async with session.begin():
            existing = await ReadData.read_latest_prediction_since(
                user.user_id, start_of_today, session
            )
            if existing is None:
                raise StorageError(f"Prediction for user_id={user.user_id} vanished after conflict")
            return _to_daily_prediction(PredictionSchema.model_validate(existing), True)
