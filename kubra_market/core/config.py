from datetime import datetime, timezone
from pydantic_settings import BaseSettings
import pytz

class Settings(BaseSettings):
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Session cookie (signed token -> session store)
    SESSION_COOKIE_NAME: str = "kubra_session"
    SESSION_COOKIE_SECURE: bool = False
    SESSION_EXPIRE_DAYS: int = 7

    LOW_STOCK_THRESHOLD: int = 10
    DASHBOARD_RECENT_ORDERS: int = 5

    # Merchant-facing dates and amounts in alert messages
    TIMEZONE: str = "Asia/Kolkata"
    CURRENCY_SYMBOL: str = "₹"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()

def utcnow() -> datetime:
    """Current instant as an aware UTC datetime (every column is timestamptz)."""
    return datetime.now(timezone.utc)

def format_local_date(value: datetime) -> str:
    """
    Render a stored UTC timestamp as a local calendar date, e.g. "Mon Oct 20 2026".
    """
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    local = value.astimezone(pytz.timezone(settings.TIMEZONE))
    return local.strftime("%a %b %d %Y")

def format_money(amount) -> str:
    return f"{settings.CURRENCY_SYMBOL}{amount:,.2f}"
