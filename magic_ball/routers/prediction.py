import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from magic_ball.db import Session
from magic_ball.domain.init_data import parse_init_data
from magic_ball.load_secrets import bot_token, verify_init_data
from magic_ball.models.dc_models import (
    DailyPredictionModel,
    ErrorModel,
    PredictRequestModel,
    PredictionResponseModel,
)
from magic_ball.services.generator import PredictionGenerator
from magic_ball.services.prediction_service import PredictionService

prediction_router = APIRouter()
prediction_service = PredictionService(Session, PredictionGenerator())


def get_prediction_service() -> PredictionService:
    return prediction_service


def get_init_data_token() -> str | None:
    """Bot token used to verify init data signatures, None when verification is off."""
    return bot_token if verify_init_data else None


class HealthAPI:
    @staticmethod
    @prediction_router.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


class PredictionAPI:
    @staticmethod
    @prediction_router.post(
        "/api/predict",
        response_model=PredictionResponseModel,
        responses={400: {"model": ErrorModel}, 500: {"model": ErrorModel}},
    )
    async def predict(
        request: PredictRequestModel,
        service: PredictionService = Depends(get_prediction_service),
        token: str | None = Depends(get_init_data_token),
    ) -> PredictionResponseModel:
        """Return the caller's prediction for the current Kyiv day

        Raises:
            ValidationError: initData is missing or malformed (400)
            StorageError: The database failed (500)
        """
        telegram_user = parse_init_data(request.initData, token)
        daily_prediction: DailyPredictionModel = await service.get_or_create_daily_prediction(
            telegram_user.id, telegram_user.first_name
        )
        logging.info(
            f"Prediction for telegram_id={telegram_user.id} cached={daily_prediction.cached}"
        )
        return PredictionResponseModel(
            prediction=daily_prediction.text,
            cached=daily_prediction.cached,
            createdAt=daily_prediction.created_at,
        )
