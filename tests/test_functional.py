from datetime import datetime

import pytest

from ledger.domain import Transaction
from ledger.functional import Either, Left, Maybe, Nothing, Right, Some, validate_transaction


def make_tx(amount, type, user_id="u1"):
    ts = datetime(2025, 9, 1, 10, 0)
    return Transaction(
        id="t1", title="Coffee", subtitle="Dining", amount=amount, date=ts, icon="",
        color_hex="", type=type, user_id=user_id, created_at=ts,
    )


def test_containers_are_abstract():
    with pytest.raises(TypeError):
        Maybe()
    with pytest.raises(TypeError):
        Either()


def test_maybe_map_and_get_or_else():
    assert Some(5).map(lambda x: x * 2).get_or_else(0) == 10
    assert Nothing().map(lambda x: x * 2).is_none()
    assert Nothing().get_or_else(-1) == -1
    assert Some(None).is_some()


def test_either_error_access():
    left = Left("boom")
    assert left.is_left()
    assert left.get_error() == "boom"
    assert Right(1).is_right()
    with pytest.raises(ValueError):
        Right(1).get_error()


def test_validate_transaction_success():
    assert validate_transaction(make_tx(-3.5, "expense")).is_right()
    assert validate_transaction(make_tx(100.0, "income")).is_right()


def test_validate_transaction_sign_mismatch():
    result = validate_transaction(make_tx(3.5, "expense"))
    assert result.is_left()
    assert result.get_error()["error"] == "sign_mismatch"

    result = validate_transaction(make_tx(-100.0, "income"))
    assert result.get_error()["error"] == "sign_mismatch"


def test_validate_transaction_unknown_type():
    error = validate_transaction(make_tx(-1.0, "transfer")).get_error()
    assert error["error"] == "unknown_type"
    assert "transfer" in error["message"]


def test_validate_transaction_missing_user():
    assert validate_transaction(make_tx(-1.0, "expense", user_id="")).get_error()["error"] == "missing_user"
