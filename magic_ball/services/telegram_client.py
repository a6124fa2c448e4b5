import logging

import httpx

from magic_ball.load_secrets import bot_token, channel_id, telegram_timeout_seconds
from magic_ball.models.dc_models import PostResultModel

TELEGRAM_API = "https://api.telegram.org"


class TelegramChannelClient:
    """Minimal Bot API client for posting to and deleting from one channel."""

    def __init__(
        self,
        token: str | None = bot_token,
        chat_id: str = channel_id,
        timeout: float = telegram_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self.transport = transport

    async def _call(self, method: str, payload: dict) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(f"{TELEGRAM_API}/bot{self.token}/{method}", json=payload)
        return response.json()

    async def send_photo(
        self, photo: str, caption: str, button_text: str, button_url: str
    ) -> PostResultModel:
        """Send a photo with an HTML caption and a single URL button

        Returns:
            PostResultModel: success flag and the id of the new message
        """
        payload = {
            "chat_id": self.chat_id,
            "photo": photo,
            "caption": caption,
            "parse_mode": "HTML",
            "reply_markup": {"inline_keyboard": [[{"text": button_text, "url": button_url}]]},
        }
        try:
            result = await self._call("sendPhoto", payload)
        except (httpx.HTTPError, ValueError) as e:
            logging.error(f"Error publishing post: {e!r}")
            return PostResultModel(success=False, error=repr(e))

        message = result.get("result") if isinstance(result, dict) and result.get("ok") else None
        message_id = message.get("message_id") if isinstance(message, dict) else None
        if not isinstance(message_id, int) or isinstance(message_id, bool):
            logging.error(f"Failed to publish post: {result}")
            return PostResultModel(success=False, error=result)
        return PostResultModel(success=True, messageId=message_id)

    async def delete_message(self, message_id: int) -> PostResultModel:
        try:
            result = await self._call(
                "deleteMessage", {"chat_id": self.chat_id, "message_id": message_id}
            )
        except (httpx.HTTPError, ValueError) as e:
            logging.error(f"Error deleting message: {e!r}")
            return PostResultModel(success=False, messageId=message_id, error=repr(e))

        if not isinstance(result, dict) or not result.get("ok"):
            logging.error(f"Failed to delete message: {result}")
            return PostResultModel(success=False, messageId=message_id, error=result)
        return PostResultModel(success=True, messageId=message_id)
