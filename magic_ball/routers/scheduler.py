from datetime import datetime

import pytz
from fastapi import APIRouter, Depends

from magic_ball.db import Session
from magic_ball.domain.daily_boundary import kyiv_now_label
from magic_ball.models.dc_models import PostResultModel
from magic_ball.services.channel_poster import (
    DELETE_HOUR,
    PUBLISH_HOUR,
    ChannelPostService,
    log_with_time,
)
from magic_ball.services.telegram_client import TelegramChannelClient

scheduler_router = APIRouter()
channel_post_service = ChannelPostService(Session, TelegramChannelClient())

PUBLISH_LABEL = f"{PUBLISH_HOUR:02d}:00 Kyiv"
DELETE_LABEL = f"{DELETE_HOUR:02d}:00 Kyiv"


def get_channel_post_service() -> ChannelPostService:
    return channel_post_service


class SchedulerStatusAPI:
    @staticmethod
    @scheduler_router.get("/health")
    async def health(service: ChannelPostService = Depends(get_channel_post_service)):
        now = datetime.now(pytz.utc)
        return {
            "status": "ok",
            "currentMessageId": await service.read_current_message_id(),
            "serverTime": now.isoformat(),
            "kyivTime": kyiv_now_label(now),
            "nextPublish": PUBLISH_LABEL,
            "nextDelete": DELETE_LABEL,
        }

    @staticmethod
    @scheduler_router.get("/status")
    async def status(service: ChannelPostService = Depends(get_channel_post_service)):
        return {
            "currentMessageId": await service.read_current_message_id(),
            "channelId": service.client.chat_id,
            "miniAppUrl": service.app_url,
            "schedules": {
                "publish": f"{PUBLISH_HOUR:02d}:00 Europe/Kyiv",
                "delete": f"{DELETE_HOUR:02d}:00 Europe/Kyiv",
            },
        }


class ManualTriggerAPI:
    @staticmethod
    @scheduler_router.post("/publish", response_model=PostResultModel)
    async def publish(service: ChannelPostService = Depends(get_channel_post_service)):
        log_with_time("Manual publish triggered")
        return await service.publish_daily_post()

    @staticmethod
    @scheduler_router.post("/delete", response_model=PostResultModel)
    async def delete(service: ChannelPostService = Depends(get_channel_post_service)):
        log_with_time("Manual delete triggered")
        return await service.delete_current_post()
