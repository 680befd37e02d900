"""Tests for snapshot transfer encoding (sync_helpers)."""

from __future__ import annotations

import pytest

from custom_components.starhunt import const
from custom_components.starhunt.helpers import sync_helpers as sh
from tests.helpers import make_app_data, make_child


def test_encode_payload_is_compact_and_keeps_unicode() -> None:
    """No spaces after separators; emoji stay as they are."""
    payload = sh.encode_payload(make_app_data(make_child()))

    assert ", " not in payload
    assert ": " not in payload
    assert "👧" in payload


def test_decode_raw_and_url_encoded() -> None:
    """Both plain JSON and the deep-link form decode to the snapshot."""
    data = make_app_data(make_child(name="Åse"))

    assert sh.decode_payload(sh.encode_payload(data)) == data
    assert sh.decode_payload(sh.encode_url_param(data)) == data


def test_url_param_has_no_reserved_characters() -> None:
    """The deep-link value is fully percent-encoded."""
    param = sh.encode_url_param(make_app_data(make_child()))

    for char in '{}":,/ ':
        assert char not in param


@pytest.mark.parametrize(
    "text",
    [
        None,
        42,
        "",
        "   ",
        "not json",
        "%7Bbroken",
        pytest.param("[" * 100000 + "]" * 100000, id="deeply_nested"),
        pytest.param("%5B" * 100000 + "%5D" * 100000, id="deeply_nested_encoded"),
    ],
)
def test_decode_failures_return_none(text: object) -> None:
    """Undecodable input gives None instead of raising."""
    assert sh.decode_payload(text) is None


def test_decode_strips_whitespace() -> None:
    """Pasted text often carries a trailing newline."""
    assert sh.decode_payload('  {"children": []}\n') == {"children": []}


def test_payload_size_counts_utf8_bytes() -> None:
    """Sizes are measured in bytes, not characters."""
    assert sh.payload_size_bytes("ab") == 2
    assert sh.payload_size_bytes("å") == 2


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (1000, {"qr": True, "sms": True, "email": True}),
        (1001, {"qr": True, "sms": False, "email": True}),
        (2901, {"qr": False, "sms": False, "email": True}),
        (50001, {"qr": False, "sms": False, "email": False}),
    ],
)
def test_channel_report(size: int, expected: dict[str, bool]) -> None:
    """Advisory limits per transport."""
    assert sh.channel_report(size) == expected


def test_unknown_channel_never_fits() -> None:
    """Channels without a limit are reported as not fitting."""
    assert sh.channel_fits(1, "carrier_pigeon") is False
    assert sh.channel_fits(1, const.SYNC_CHANNEL_QR) is True
