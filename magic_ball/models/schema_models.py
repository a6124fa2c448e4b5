from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import date, datetime


class UserSchema(BaseModel):
    user_id: int
    telegram_id: int
    first_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PredictionSchema(BaseModel):
    prediction_id: UUID
    user_id: int
    text: str
    created_at: datetime
    prediction_day: date

    class Config:
        from_attributes = True

