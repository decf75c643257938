"""Jinja2 templates for the HTML pages, with display-timezone helpers."""

from datetime import datetime
from pathlib import Path

from fastapi.templating import Jinja2Templates

from app.config import settings
from app.services.aggregation_service import parse_timestamp
from app.utils.timestamps import month_name

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

DISPLAY_TIMEZONE = settings.report_timezone()

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_timestamp(value: str) -> str:
    """Render a stored timestamp in the report timezone, e.g. 'Oct 01, 2025, 02:05:09 PM'."""
    local = parse_timestamp(value).astimezone(DISPLAY_TIMEZONE)
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{month_name(local.month)[:3]} {local:%d, %Y, %I:%M:%S} {meridiem}"


def format_date(value: str) -> str:
    return parse_timestamp(value).astimezone(DISPLAY_TIMEZONE).strftime("%Y-%m-%d")


def local_now() -> str:
    return datetime.now(DISPLAY_TIMEZONE).strftime("%Y-%m-%d %H:%M:%S %Z")


templates.env.filters["timestamp"] = format_timestamp
templates.env.filters["date"] = format_date
templates.env.globals["local_now"] = local_now
