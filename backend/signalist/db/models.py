# backend/signalist/db/models.py

import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime.datetime:
    # Columns store naive UTC timestamps
    return datetime.datetime.now(datetime.UTC).replace(tzinfo=None)


class User(Base):
    # Owned by the auth provider; only country and daily_emails are written here.
    __tablename__ = "user"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String)
    country = Column(String)
    daily_emails = Column("dailyEmails", Boolean, default=True, nullable=False)
    created_at = Column("createdAt", DateTime, default=utcnow)

    def __repr__(self):
        return f"<User(email='{self.email}')>"


class AuthSession(Base):
    __tablename__ = "session"

    id = Column(String, primary_key=True)
    token = Column(String, unique=True, nullable=False, index=True)
    user_id = Column("userId", String, nullable=False, index=True)
    expires_at = Column("expiresAt", DateTime, nullable=False)

    def __repr__(self):
        return f"<AuthSession(user_id='{self.user_id}')>"


class WatchlistItem(Base):
    __tablename__ = "watchlist_items"
    # Concurrent adds and toggles rely on this constraint, not on the existence check.
    __table_args__ = (
        UniqueConstraint("user_id", "symbol", name="uq_watchlist_user_symbol"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, nullable=False, index=True)
    symbol = Column(String, nullable=False)
    company = Column(String, nullable=False)
    added_at = Column(DateTime, default=utcnow, nullable=False)

    # Cached metrics, only touched by a metric refresh
    price = Column(Float)
    change = Column(Float)
    market_cap = Column(Float)
    pe_ratio = Column(Float)

    def __repr__(self):
        return f"<WatchlistItem(user_id='{self.user_id}', symbol='{self.symbol}')>"
