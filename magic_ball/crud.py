from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc, delete
from datetime import date, datetime
import logging

from magic_ball.models.schemas import Base, ChannelPost, Prediction, User, utc_now

# Helpers only add/flush. Transaction boundaries belong to the service layer.


class ReadData:
    @staticmethod
    async def read_user(telegram_id: int, session: AsyncSession) -> User | None:
        """Read the user registered with the given Telegram id

        Args:
            telegram_id (int): External platform id
        """
        stmt = select(User).where(User.telegram_id == telegram_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_latest_prediction_since(
        user_id: int, since: datetime, session: AsyncSession
    ) -> Prediction | None:
        """Read the newest prediction created at or after `since`

        Args:
            user_id (int): Owner of the prediction
            since (datetime): Naive UTC lower bound, inclusive

        Returns:
            Prediction | None: The latest prediction, or None if there is none
        """
        stmt = (
            select(Prediction)
            .where(Prediction.user_id == user_id, Prediction.created_at >= since)
            .order_by(desc(Prediction.created_at))
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    @staticmethod
    async def read_channel_post(channel_id: str, session: AsyncSession) -> ChannelPost | None:
        stmt = select(ChannelPost).where(ChannelPost.channel_id == channel_id)
        result = await session.execute(stmt)
        return result.scalars().first()


class CreateData:
    @staticmethod
    async def create_table(engine) -> None:
        """Create tables if not exists"""
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @staticmethod
    async def create_user(telegram_id: int, first_name: str | None, session: AsyncSession) -> User:
        new_user = User(telegram_id=telegram_id, first_name=first_name, created_at=utc_now())
        session.add(new_user)
        await session.flush()
        return new_user

    @staticmethod
    async def create_prediction(
        user_id: int,
        text: str,
        created_at: datetime,
        prediction_day: date,
        session: AsyncSession,
    ) -> Prediction:
        """Add a prediction row

        Args:
            user_id (int): Owner of the prediction
            text (str): Generated or fallback text
            created_at (datetime): Naive UTC creation time
            prediction_day (date): Kyiv calendar date of created_at
        """
        new_prediction = Prediction(
            user_id=user_id,
            text=text,
            created_at=created_at,
            prediction_day=prediction_day,
        )
        session.add(new_prediction)
        await session.flush()
        return new_prediction


class UpdateData:
    @staticmethod
    async def update_channel_message_id(
        channel_id: str, message_id: int | None, session: AsyncSession
    ) -> ChannelPost:
        """Store the id of the message currently posted in the channel

        Args:
            channel_id (str): Telegram channel
            message_id (int | None): Posted message, None once it has been deleted
        """
        channel_post = await ReadData.read_channel_post(channel_id, session)
        if channel_post is None:
            channel_post = ChannelPost(channel_id=channel_id)
            session.add(channel_post)
        channel_post.message_id = message_id
        channel_post.updated_at = utc_now()
        await session.flush()
        return channel_post


class DeleteData:
    @staticmethod
    async def delete_all_predictions(session: AsyncSession) -> int:
        result = await session.execute(delete(Prediction))
        logging.info(f"Deleted predictions: {result.rowcount}")
        return result.rowcount

    @staticmethod
    async def delete_all_users(session: AsyncSession) -> int:
        result = await session.execute(delete(User))
        logging.info(f"Deleted users: {result.rowcount}")
        return result.rowcount
