"""Daily promo post lifecycle for the channel.

The id of the posted message is kept in the database so a restart between
publish and delete does not leave the post behind.
"""

import logging
from datetime import datetime

import pytz
from sqlalchemy.ext.asyncio import async_sessionmaker

from magic_ball.crud import ReadData, UpdateData
from magic_ball.domain.daily_boundary import kyiv_now_label
from magic_ball.load_secrets import image_url, mini_app_url
from magic_ball.models.dc_models import PostResultModel
from magic_ball.services.telegram_client import TelegramChannelClient

PUBLISH_HOUR = 8
DELETE_HOUR = 0

POST_CAPTION = (
    "👋 <b>Пс-с, Всесвіт на лінії!</b>\n\n"
    "Всесвіт нагадує: ранок без магії — гроші на вітер 💸. "
    "Куля заряджена і чекає вашого дотику.\n\n"
    "Тисніть кнопку, <b>потріть гарненько кулю</b> (як лампу джина) "
    "і ловіть свій знак долі 👇"
)
POST_BUTTON_TEXT = "🔮 Хочу передбачення!"


def log_with_time(message: str) -> None:
    logging.info(f"[{kyiv_now_label(datetime.now(pytz.utc))}] {message}")


class ChannelPostService:
    def __init__(
        self,
        Session: async_sessionmaker,
        client: TelegramChannelClient,
        photo_url: str = image_url,
        app_url: str = mini_app_url,
    ):
        self.Session: async_sessionmaker = Session
        self.client: TelegramChannelClient = client
        self.photo_url = photo_url
        self.app_url = app_url

    async def read_current_message_id(self) -> int | None:
        async with self.Session() as session:
            channel_post = await ReadData.read_channel_post(self.client.chat_id, session)
            return channel_post.message_id if channel_post else None

    async def _store_message_id(self, message_id: int | None) -> None:
        async with self.Session() as session:
            async with session.begin():
                await UpdateData.update_channel_message_id(self.client.chat_id, message_id, session)

    async def publish_daily_post(self) -> PostResultModel:
        """Replace the previous post (if any) with a fresh one and remember its id"""
        log_with_time("Starting daily post publication...")

        current_message_id = await self.read_current_message_id()
        if current_message_id is not None:
            await self.delete_post(current_message_id)

        result = await self.client.send_photo(
            self.photo_url, POST_CAPTION, POST_BUTTON_TEXT, self.app_url
        )
        if result.success:
            await self._store_message_id(result.messageId)
            log_with_time(f"Post published successfully! Message ID: {result.messageId}")
        return result

    async def delete_post(self, message_id: int | None) -> PostResultModel:
        if message_id is None:
            log_with_time("No message ID to delete")
            return PostResultModel(success=False, error="No message ID")

        log_with_time(f"Deleting message {message_id}...")
        result = await self.client.delete_message(message_id)
        if result.success:
            await self._store_message_id(None)
            log_with_time(f"Message {message_id} deleted successfully")
        return result

    async def delete_current_post(self) -> PostResultModel:
        current_message_id = await self.read_current_message_id()
        if current_message_id is None:
            log_with_time("No post to delete")
        return await self.delete_post(current_message_id)
