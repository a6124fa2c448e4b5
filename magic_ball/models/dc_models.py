from pydantic import BaseModel
from datetime import datetime
from typing import Any, Optional

class TelegramUserModel(BaseModel):
    """User object embedded in the Mini App init data."""
    id: int
    first_name: Optional[str] = None

class PredictRequestModel(BaseModel):
    initData: Optional[str] = None

class PredictionResponseModel(BaseModel):
    prediction: str
    cached: bool
    createdAt: datetime

class ErrorModel(BaseModel):
    error: str

class DailyPredictionModel(BaseModel):
    """Result of the daily prediction decision. created_at is an aware UTC instant."""
    text: str
    created_at: datetime
    cached: bool


class PostResultModel(BaseModel):
    success: bool
    messageId: Optional[int] = None
    error: Optional[Any] = None
