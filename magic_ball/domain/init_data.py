"""Telegram Mini App init data parsing and signature check."""

import hashlib
import hmac
import json
from urllib.parse import parse_qsl

from magic_ball.exceptions import ValidationError
from magic_ball.models.dc_models import TelegramUserModel

MAX_TELEGRAM_ID = 2**63 - 1


def verify_init_data(init_data: str, bot_token: str) -> bool:
    """Check the `hash` field of init data against the bot token.

    Args:
        init_data (str): Raw query string from Telegram.WebApp.initData
        bot_token (str): Token of the bot that opened the Mini App

    Returns:
        bool: True if the signature matches
    """
    params = dict(parse_qsl(init_data, keep_blank_values=True))
    hash_value = params.pop("hash", None)
    if not hash_value:
        return False
    data_check_string = "\n".join(f"{k}={v}" for k, v in sorted(params.items()))
    secret_key = hmac.new("WebAppData".encode(), bot_token.encode(), hashlib.sha256).digest()
    calculated = hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()
    return hmac.compare_digest(calculated, hash_value)


def _telegram_id(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Invalid initData")
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if not isinstance(value, int) or not 0 < value <= MAX_TELEGRAM_ID:
        raise ValidationError("Invalid initData")
    return value


def parse_init_data(init_data: str | None, bot_token: str | None = None) -> TelegramUserModel:
    """Extract the Telegram user from init data.

    Args:
        init_data (str | None): Raw init data sent by the Mini App
        bot_token (str | None, optional): Verify the signature with this token when given. Defaults to None.

    Raises:
        ValidationError: init data is missing, unsigned or has no usable user id

    Returns:
        TelegramUserModel: Telegram id and optional first name
    """
    if not init_data:
        raise ValidationError("initData is required")
    if bot_token and not verify_init_data(init_data, bot_token):
        raise ValidationError("Invalid initData")

    params = dict(parse_qsl(init_data, keep_blank_values=True))
    user_param = params.get("user")
    if not user_param:
        raise ValidationError("Invalid initData")
    try:
        user = json.loads(user_param)
    except ValueError:
        raise ValidationError("Invalid initData")
    if not isinstance(user, dict):
        raise ValidationError("Invalid initData")

    first_name = user.get("first_name")
    if not isinstance(first_name, str) or not first_name:
        first_name = None
    return TelegramUserModel(id=_telegram_id(user.get("id")), first_name=first_name)
