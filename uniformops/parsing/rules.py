import re

from ..models import PaymentStatus

# Order matters: the first keyword found on a header line names the school.
SCHOOL_KEYWORDS = (
    "TRINUM",
    "DIANTE DO APRENDER",
    "CRESCIMENTO",
    "BABYTOOM",
    "CHILD TIME",
    "MAPLE BEAR",
    "SANTA TERESA",
    "AUDAZ",
    "CIRANDA",
)

FALLBACK_SCHOOL = "TRINUM"
UNKNOWN_SCHOOL = "UNKNOWN"
DEFAULT_AREA_CODE = "98"

UNKNOWN_CUSTOMER = "Unknown Customer"
UNDEFINED_ITEM = "Undefined Item"
STANDARD_SIZE = "Standard"

# Loose Brazilian number: optional area code, optional leading 9, 4+4 digits
PHONE_RE = re.compile(r"(\d{2})?\s?9?\s?\d{4}[\s-]?\d{4}")
PHONE_LINE_NOISE_RE = re.compile(r"contato|:|cont\.?", re.IGNORECASE)

NAME_LABEL_RE = re.compile(r"^(?:Mãe|Mae|Pai|Contato|Nome)[:\s]", re.IGNORECASE)
NAME_LABEL_PREFIX_RE = re.compile(r"^(?:Mãe|Mae|Pai|Contato|Nome)[:\s]*", re.IGNORECASE)
NAME_NOISE_RE = re.compile(r"cont\.?|:", re.IGNORECASE)
PAGO_FRAGMENT_RE = re.compile(r"[- ]?pago", re.IGNORECASE)

ITEM_RE = re.compile(r"polo|calça|bermuda|regata|short|saia|vestido|conjunto|camisa", re.IGNORECASE)
DIGIT_RE = re.compile(r"\d")

QUANTITY_RE = re.compile(r"^(\d+)\s*")
# ASCII word semantics so an accented letter ends the size token
SIZE_RE = re.compile(r"\b(?:tam\.?|t-?|size)[:\s]*(\w+)", re.IGNORECASE | re.ASCII)
TRAILING_SIZE_RE = re.compile(r"\s(\d+)$")
PRODUCT_NOISE_RE = re.compile(r"[-:]")


def school_for(line: str):
    """First known school keyword contained in ``line`` (case-insensitive), or None."""
    upper = line.upper()
    for school in SCHOOL_KEYWORDS:
        if school in upper:
            return school
    return None


def is_school_header(line: str) -> bool:
    return school_for(line) is not None


def payment_status_in(text: str) -> PaymentStatus:
    upper = text.upper()
    if "PAGO" in upper:
        return PaymentStatus.PAID_IN_FULL
    if "METADE" in upper or "50%" in upper:
        return PaymentStatus.PARTIAL
    return PaymentStatus.PENDING


def mentions_paid(text: str) -> bool:
    return "PAGO" in text.upper()
