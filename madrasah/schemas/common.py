"""
Shared field checks and form → record coercions.
"""

import math
import re
import time
from datetime import date
from typing import Any, Optional

from pydantic_core import PydanticCustomError

BD_PHONE = re.compile(r"^01[3-9]\d{8}$")
NID = re.compile(r"^\d{10,17}$")
AMOUNT = re.compile(r"^\d+(\.\d{1,2})?$")
TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


def bd_phone(value: Optional[str]) -> Optional[str]:
    """Bangladeshi mobile number (01[3-9]xxxxxxxx). Blank passes; required-ness is the field's job."""
    if value and not BD_PHONE.match(value):
        raise PydanticCustomError("bd_phone", "সঠিক বাংলাদেশী ফোন নম্বর দিন (০১xxxxxxxx)")
    return value


def national_id(value: Optional[str]) -> Optional[str]:
    if value and not NID.match(value):
        raise PydanticCustomError("nid", "সঠিক এনআইডি নম্বর দিন")
    return value


def iso_date(value: Optional[str]) -> Optional[str]:
    if value:
        try:
            date.fromisoformat(value)
        except ValueError:
            raise PydanticCustomError("date", "সঠিক তারিখ দিন (YYYY-MM-DD)")
    return value


def clock_time(value: Optional[str]) -> Optional[str]:
    if value and not TIME.match(value):
        raise PydanticCustomError("time", "সঠিক সময় দিন (HH:MM)")
    return value


def amount_text(value: str) -> str:
    if not AMOUNT.match(value or ""):
        raise PydanticCustomError("amount", "সঠিক পরিমাণ লিখুন")
    return value


def non_negative(value: Optional[str]) -> bool:
    """True for text that parses to a finite number >= 0 ("inf", "nan" and "1e400" do not)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number >= 0


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def to_number(value: Any) -> Optional[float]:
    value = blank_to_none(value)
    return None if value is None else float(value)


def to_int(value: Any) -> Optional[int]:
    value = blank_to_none(value)
    return None if value is None else int(value)


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def generated_id(prefix: str, index: Optional[int] = None) -> str:
    """Human-readable row code such as ``EXP-1760668800000-0``."""
    millis = int(time.time() * 1000)
    return f"{prefix}-{millis}" if index is None else f"{prefix}-{millis}-{index}"
