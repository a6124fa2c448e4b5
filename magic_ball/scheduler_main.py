from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager

from magic_ball.crud import CreateData
from magic_ball.db import engine
from magic_ball.load_secrets import server_port
from magic_ball.domain.daily_boundary import KYIV_TIMEZONE
from magic_ball.routers import scheduler as scheduler_routes
from magic_ball.routers.scheduler import channel_post_service
from magic_ball.services.channel_poster import DELETE_HOUR, PUBLISH_HOUR, log_with_time

scheduler = AsyncIOScheduler(timezone=KYIV_TIMEZONE)
logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


async def scheduled_publish() -> None:
    log_with_time(f"Cron triggered: {PUBLISH_HOUR:02d}:00 Kyiv time - Publishing post")
    await channel_post_service.publish_daily_post()


async def scheduled_delete() -> None:
    log_with_time(f"Cron triggered: {DELETE_HOUR:02d}:00 Kyiv time - Deleting post")
    await channel_post_service.delete_current_post()


def register_jobs(target: AsyncIOScheduler) -> None:
    target.add_job(
        scheduled_publish, "cron", hour=PUBLISH_HOUR, minute=0,
        id="publish_daily_post", replace_existing=True,
    )
    target.add_job(
        scheduled_delete, "cron", hour=DELETE_HOUR, minute=0,
        id="delete_daily_post", replace_existing=True,
    )


@asynccontextmanager
async def lifespan(app):
    """Create the channel post table and start the publish/delete cron jobs.
    This function is called to start the server.
    """
    await CreateData.create_table(engine)
    register_jobs(scheduler)
    scheduler.start()
    log_with_time(f"Channel ID: {channel_post_service.client.chat_id}")
    log_with_time(f"Mini App URL: {channel_post_service.app_url}")
    log_with_time(f"Cron jobs scheduled: publish {PUBLISH_HOUR:02d}:00, delete {DELETE_HOUR:02d}:00 Kyiv time")
    try:
        yield
    finally:
        scheduler.shutdown()
        await engine.dispose()
        logging.info("Stop Scheduler")


app = FastAPI(lifespan=lifespan)
app.include_router(scheduler_routes.scheduler_router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=server_port)
