from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column
from sqlalchemy.types import BigInteger, Date, DateTime, Integer, String, TEXT, Uuid
from uuid6 import uuid7
from datetime import datetime, timezone


def utc_now() -> datetime:
    # Timestamps are stored as naive UTC so SQLite and PostgreSQL compare them the same way.
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"
    user_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    telegram_id = Column(BigInteger, unique=True, nullable=False, index=True)
    first_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now)

    predictions = relationship(
        "Prediction",
        back_populates="user",
        cascade="all, delete",
    )


class Prediction(Base):
    __tablename__ = "predictions"
    __table_args__ = (
        UniqueConstraint("user_id", "prediction_day", name="uq_prediction_user_day"),
    )
    prediction_id = Column(Uuid, primary_key=True, default=uuid7)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False, index=True)
    text = Column(TEXT, nullable=False)
    created_at = Column(DateTime, default=utc_now, index=True)
    prediction_day = Column(Date, nullable=False)  # Kyiv calendar date of created_at

    user = relationship("User", back_populates="predictions")


class ChannelPost(Base):
    __tablename__ = "channel_posts"
    channel_id = Column(String, primary_key=True)
    message_id = Column(BigInteger, nullable=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
