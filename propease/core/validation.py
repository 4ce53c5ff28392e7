# propease/core/validation.py
"""
Field-format checks shared by every workflow.

Each field kind maps to one pattern and one user-facing message, so a phone
number is validated the same way whether it arrives on a client form, an
enquiry with a new client, a booking with a new client or a bank contact.
"""
from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from propease.core.errors import InvalidInput

REQUIRED_MESSAGE = "Please fill all required fields"

FIELD_RULES: dict[str, tuple[re.Pattern, str]] = {
    "email": (re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$"), "Invalid email format"),
    "phone": (re.compile(r"^\d{10}$"), "Mobile number must be 10 digits"),
    "pan": (re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$"), "Invalid PAN format"),
    "aadhar": (re.compile(r"^\d{12}$"), "Invalid Aadhar format"),
    "maharera": (re.compile(r"^P\d{11}$"), "Invalid Maharera number format"),
    "ifsc": (re.compile(r"^[A-Z]{4}0[A-Z0-9]{6}$"), "Invalid IFSC code"),
    "time": (re.compile(r"^([01]\d|2[0-3]):[0-5]\d$"), "Invalid time format (HH:MM)"),
}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid(kind: str, value: Optional[str]) -> bool:
    pattern, _ = FIELD_RULES[kind]
    return value is not None and bool(pattern.match(value.strip()))


def check(kind: str, value: Optional[str], *, optional: bool = False) -> None:
    """
    Raise InvalidInput when `value` does not match the rule for `kind`.
    Optional fields are only checked when they carry a value.
    """
    if kind not in FIELD_RULES:
        raise KeyError(f"Unknown field kind: {kind}")
    if optional and is_blank(value):
        return
    if not is_valid(kind, value):
        raise InvalidInput(FIELD_RULES[kind][1])


def require(values: Mapping[str, Any], fields: Iterable[str], message: str = REQUIRED_MESSAGE) -> None:
    for name in fields:
        if is_blank(values.get(name)):
            raise InvalidInput(message)


def check_fields(values: Mapping[str, Any], kinds: Mapping[str, str], optional: Iterable[str] = ()) -> None:
    """
    kinds: field name -> field kind, e.g. {"email": "email", "mobile_number": "phone"}.
    """
    opt = set(optional)
    for name, kind in kinds.items():
        check(kind, values.get(name), optional=name in opt)


def check_percentage_total(percentages: Iterable[Any], *, exact: bool) -> Decimal:
    """
    Disbursement schedule: never above 100, and exactly 100 once submitted.
    """
    total = sum((Decimal(str(p)) for p in percentages), Decimal("0"))
    if total > Decimal("100"):
        raise InvalidInput("Total disbursement percentage cannot exceed 100%")
    if exact and total != Decimal("100"):
        raise InvalidInput("Total disbursement percentage must equal 100%")
    return total
