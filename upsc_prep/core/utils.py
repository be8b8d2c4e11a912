# upsc_prep/core/utils.py
import logging
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ValidationUtils:
    """Utility functions for data validation"""

    @staticmethod
    def is_valid_email(email: str) -> bool:
        return bool(email) and bool(EMAIL_PATTERN.match(email))

    @staticmethod
    def is_blank(value: Optional[str]) -> bool:
        return value is None or not str(value).strip()

    @staticmethod
    def count_words(text: str) -> int:
        """Number of whitespace-separated tokens"""
        return len(text.split()) if text else 0

    @staticmethod
    def parse_positive_int(value: Any, default: int) -> int:
        try:
            number = int(value)
        except (TypeError, ValueError):
            return default
        return number if number > 0 else default


class DateTimeUtils:
    """Utility functions for date/time operations"""

    @staticmethod
    def now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def today() -> date:
        """The server's local calendar day; daily content is keyed on it"""
        return date.today()

    @staticmethod
    def day_bounds(day: date) -> tuple:
        """[start, end) of a local calendar day as aware UTC datetimes"""
        start = datetime.combine(day, datetime.min.time()).astimezone(timezone.utc)
        return start, start + timedelta(days=1)

    @staticmethod
    def week_start(day: Optional[date] = None) -> date:
        """Monday of the week containing ``day``"""
        day = day or DateTimeUtils.today()
        return day - timedelta(days=day.weekday())

    @staticmethod
    def to_date(value: Any) -> date:
        """Parse a request date (``YYYY-MM-DD`` or ISO datetime) to a calendar day"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            raise ValueError(f"Invalid date: {value}")

    @staticmethod
    def isoformat(value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None


def round_to(value: float, digits: int = 0) -> float:
    """Round half away from zero, the way score displays expect"""
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5) / factor
    rounded = rounded if value >= 0 else -rounded
    return int(rounded) if digits == 0 else rounded


def percentage(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0


def split_topics(results: Dict[str, Dict[str, int]], strong_ratio: float,
                 weak_ratio: float) -> tuple:
    """Split per-topic {correct, total} tallies into (strong, weak) name lists"""
    strong: List[str] = []
    weak: List[str] = []
    for name, tally in results.items():
        total = tally.get("total", 0)
        if total <= 0:
            continue
        ratio = tally.get("correct", 0) / total
        if ratio >= strong_ratio:
            strong.append(name)
        elif ratio < weak_ratio:
            weak.append(name)
    return strong, weak


class ResponseFormatter:
    """Utility functions for formatting API responses"""

    @staticmethod
    def success(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
        response: Dict[str, Any] = {"status": "success"}
        if message is not None:
            response["message"] = message
        if data is not None:
            response["data"] = data
        return response

    @staticmethod
    def recommendation(type_: str, title: str, description: str, action: str, link: str) -> Dict[str, str]:
        return {
            "type": type_,
            "title": title,
            "description": description,
            "action": action,
            "link": link,
        }
