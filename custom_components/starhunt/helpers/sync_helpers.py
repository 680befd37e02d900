# File: helpers/sync_helpers.py
"""Snapshot transfer helpers for Star Hunt.

Devices exchange a whole snapshot as compact JSON text. The same text travels
through a QR code, an SMS, an e-mail body or a deep-link query parameter
(percent-encoded). This module only converts between the snapshot and that
text; the transports themselves live outside the integration.

Functions:
    - encode_payload: Snapshot → compact JSON
    - encode_url_param: Snapshot → percent-encoded JSON for deep links
    - decode_payload: JSON or percent-encoded JSON → object, or None
    - payload_size_bytes: UTF-8 size of a payload
    - channel_fits: Whether a payload size suits a transport
    - channel_report: channel_fits for every known transport
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from urllib.parse import quote, unquote

from .. import const

if TYPE_CHECKING:
    from ..type_defs import AppData


def encode_payload(data: AppData) -> str:
    """Serialize a snapshot as compact JSON (non-ASCII kept as is)."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def encode_url_param(data: AppData) -> str:
    """Serialize a snapshot for use as a deep-link query value."""
    return quote(encode_payload(data), safe="")


def decode_payload(text: Any) -> Any:
    """Decode transferred text into a Python object.

    Accepts raw JSON or its percent-encoded form (deep links, some e-mail
    clients). Returns None if text cannot be decoded; the result is NOT
    validated, callers pass it through sanitize_app_data.
    """
    if not isinstance(text, str):
        return None
    candidate = text.strip()
    if not candidate:
        return None

    for attempt in (candidate, unquote(candidate)):
        try:
            return json.loads(attempt)
        except (ValueError, RecursionError):
            continue

    const.LOGGER.debug(
        "DEBUG: Sync payload could not be decoded (%s characters)", len(candidate)
    )
    return None


def payload_size_bytes(payload: str) -> int:
    """Return the UTF-8 encoded size of payload."""
    return len(payload.encode("utf-8"))


def channel_fits(size_bytes: int, channel: str) -> bool:
    """Return True if a payload of size_bytes suits channel.

    Limits are advisory; unknown channels never fit.
    """
    limit = const.SYNC_CHANNEL_LIMITS.get(channel)
    if limit is None:
        return False
    return size_bytes <= limit


def channel_report(size_bytes: int) -> dict[str, bool]:
    """Return {channel: fits} for every known transport."""
    return {
        channel: channel_fits(size_bytes, channel)
        for channel in const.SYNC_CHANNEL_LIMITS
    }
