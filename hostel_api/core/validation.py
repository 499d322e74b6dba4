# hostel_api/core/validation.py

import re
from typing import Any, Iterable

from hostel_api.core.errors import ApiError

ROLL_NO_PATTERN = re.compile(r"[0-9]{8}")
MOBILE_NO_PATTERN = re.compile(r"[0-9]{10}")

ROLL_NO_EXAMPLE = "11232763"
MOBILE_NO_EXAMPLE = "9876543210"


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def missing_fields(data: dict, required: Iterable[str]) -> list[str]:
    return [field for field in required if is_blank(data.get(field))]


def require_fields(data: dict, required: Iterable[str]) -> None:
    """
    Raises 400 listing every required field when any of them is missing or
    empty. The full list is returned so the client can correct in one go.
    """
    required = list(required)
    if missing_fields(data, required):
        raise ApiError(400, "Missing required fields", required=required)


def ensure_roll_no(roll_no: Any) -> str:
    if not isinstance(roll_no, str) or not ROLL_NO_PATTERN.fullmatch(roll_no):
        raise ApiError(
            400,
            "Invalid roll number format. Must be exactly 8 digits",
            example=ROLL_NO_EXAMPLE,
        )
    return roll_no


def ensure_mobile_no(mobile_no: Any) -> str:
    if not isinstance(mobile_no, str) or not MOBILE_NO_PATTERN.fullmatch(mobile_no):
        raise ApiError(
            400,
            "Invalid mobile number format. Must be exactly 10 digits",
            example=MOBILE_NO_EXAMPLE,
        )
    return mobile_no
