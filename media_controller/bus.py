"""
Delivery adapter: turns a `(topic, payload)` pair into a `ControlMessage`.

Topics live under a fixed root, `/media/<serie>/...`; the serie is the scope
of the message. Payloads are JSON objects `{"action", "season"?, "episode"?}`.
Older publishers put everything in the topic instead,
`/media/<serie>/<season>/<episode>/<action>` with an empty payload; both are
accepted. Anything else is dropped here and never reaches the controller.
"""

import json
from typing import Any, Optional, Union

from pydantic import ValidationError

from .constants import TOPIC_ROOT
from .models import CommandPayload, ControlMessage


def _topic_segments(topic: str, root: str = TOPIC_ROOT) -> Optional[list]:
    """Path segments after the root, None if the topic is not under it."""
    root_parts = [p for p in root.split("/") if p]
    parts = [p for p in (topic or "").split("/") if p]
    if len(parts) <= len(root_parts) or parts[:len(root_parts)] != root_parts:
        return None
    return parts[len(root_parts):]


def scope_from_topic(topic: str, root: str = TOPIC_ROOT) -> Optional[str]:
    segments = _topic_segments(topic, root)
    if not segments or segments[0] in ("#", "+"):
        return None
    return segments[0]


def _decode_payload(payload: Union[bytes, str, dict, None]) -> Optional[CommandPayload]:
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        if not payload.strip():
            return None
        return CommandPayload.model_validate_json(payload)
    if payload is None:
        return None
    return CommandPayload.model_validate(payload)


def parse_delivery(topic: str, payload: Any, root: str = TOPIC_ROOT) -> Optional[ControlMessage]:
    """
    # Parse Delivery
    Returns the control message or `None` when the delivery has to be dropped.
    """
    scope = scope_from_topic(topic, root)
    if scope is None:
        print(f"⚠️ Dropping message on invalid topic: {topic!r}")
        return None

    try:
        decoded = _decode_payload(payload)
    except (ValidationError, ValueError, json.JSONDecodeError) as e:
        print(f"⚠️ Dropping message on {topic}: payload does not parse ({e.__class__.__name__})")
        return None

    if decoded is not None:
        return ControlMessage(
            scope=scope,
            action=decoded.action,
            season=decoded.season,
            episode=decoded.episode,
        )

    # No payload: legacy path-encoded command
    segments = _topic_segments(topic, root)
    if len(segments) == 4:
        _, season, episode, action = segments
        return ControlMessage(scope=scope, action=action, season=season, episode=episode)

    print(f"⚠️ Dropping message on {topic}: empty payload")
    return None
