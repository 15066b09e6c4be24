import pytest

from uniformops.config import normalize_database_url
from uniformops.models import PaymentStatus
from uniformops.util import digits_only, norm_phone


def test_digits_only():
    assert digits_only("(98) 99999-8888") == "98999998888"
    assert digits_only(None) == ""
    assert digits_only("") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("9999-1234", "9899991234"),
        ("99999 1234", "98999991234"),
        ("98 99999-1234", "98999991234"),
        ("12345", "12345"),
        (None, ""),
    ],
)
def test_norm_phone(raw, expected):
    assert norm_phone(raw) == expected


def test_norm_phone_area_code():
    assert norm_phone("99999-1234", area_code="11") == "11999991234"


def test_payment_status_only_upgrades():
    assert PaymentStatus.PENDING.upgrade(PaymentStatus.PARTIAL) == PaymentStatus.PARTIAL
    assert PaymentStatus.PARTIAL.upgrade(PaymentStatus.PAID_IN_FULL) == PaymentStatus.PAID_IN_FULL
    assert PaymentStatus.PAID_IN_FULL.upgrade(PaymentStatus.PARTIAL) == PaymentStatus.PAID_IN_FULL
    assert PaymentStatus.PARTIAL.upgrade(PaymentStatus.PENDING) == PaymentStatus.PARTIAL


def test_normalize_database_url():
    assert normalize_database_url("") == "sqlite:///./uniformops.db"
    assert normalize_database_url(" postgres://u:p@h/db ") == "postgresql+psycopg2://u:p@h/db"
    assert normalize_database_url("postgresql://u@h/db") == "postgresql://u@h/db"
