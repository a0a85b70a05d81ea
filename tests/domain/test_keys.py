from __future__ import annotations

from datetime import datetime

import pytest

from sheetrecon.domain.keys import (
    CONSOLIDATION_KEY_POLICY,
    JOIN_KEY_POLICY,
    CasePolicy,
    IdentitySelector,
    KeyPolicy,
    WhitespacePolicy,
    identity_key,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, ""),
        ("", ""),
        ("   ", ""),
        ("  EXP  001 ", "EXP 001"),
        ("EXP\t001\n", "EXP 001"),
        (1234, "1234"),
        (1234.0, "1234"),
        (12.5, "12.5"),
        (True, "true"),
        (False, "false"),
        (datetime(2023, 1, 1), "2023-01-01T00:00:00"),
    ],
)
def test_consolidation_key_normalizes_values(value: object, expected: str) -> None:
    assert identity_key(value, CONSOLIDATION_KEY_POLICY) == expected  # type: ignore[arg-type]


def test_join_key_strips_all_whitespace() -> None:
    assert identity_key(" A 1 ", JOIN_KEY_POLICY) == "A1"
    assert identity_key("A 1", JOIN_KEY_POLICY) == "A1"


def test_keys_are_case_sensitive_unless_folding_is_requested() -> None:
    folding = KeyPolicy(whitespace=WhitespacePolicy.STRIP, case=CasePolicy.FOLD)

    assert identity_key("a1", JOIN_KEY_POLICY) != identity_key("A1", JOIN_KEY_POLICY)
    assert identity_key("a1", folding) == identity_key("A1", folding)


def test_integer_and_integral_float_share_a_key() -> None:
    assert identity_key(77) == identity_key(77.0) == identity_key(" 77 ")


def test_selector_prefers_named_field() -> None:
    selector = IdentitySelector(field="Expediente")

    assert selector.key({"Nombre": "Ana", "Expediente": " E-1 "}) == "E-1"


def test_selector_falls_back_to_first_column() -> None:
    assert IdentitySelector(field="Expediente").key({"Folio": "F-9", "Nombre": "Ana"}) == "F-9"
    assert IdentitySelector().key({"Folio": 9}) == "9"
    assert IdentitySelector().key({}) == ""
