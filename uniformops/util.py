import re
from datetime import datetime, timezone

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def digits_only(phone: str | None) -> str:
    if not phone:
        return ""
    return re.sub(r"\D", "", phone)

def norm_phone(phone: str | None, area_code: str = "98") -> str:
    """Digits-only phone; local 8/9 digit numbers get the default area code."""
    digits = digits_only(phone)
    if len(digits) in (8, 9):
        digits = area_code + digits
    return digits
