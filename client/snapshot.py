"""Deserialise ``DATA:`` payloads into :class:`WorldState` values.

Member names are matched case-insensitively, an exact-case match taking
precedence, so ``Players``/``players`` and ``X``/``x`` bind to the same field.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Mapping

from . import constants
from .entities import EntityKind, EntityRecord, SceneData, WorldState
from .errors import ParseError

WORLDS_ENVELOPE = "Worlds"

_MAX_ID_DIGITS = len(str(constants.MAX_CLIENT_ID))
_KIND_MEMBERS = frozenset(kind.value.lower() for kind in EntityKind)


def parse_world_state(payload: str) -> WorldState:
    """Parse a snapshot document into a fresh :class:`WorldState`.

    The document maps scene names to scene objects, optionally wrapped in a
    ``{"Worlds": ...}`` envelope. Raises :class:`ParseError` on any malformed
    content; nothing is returned partially.
    """

    try:
        document = json.loads(payload)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Invalid snapshot JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ParseError("Snapshot must be a JSON object")

    if _is_envelope(document):
        document = next(iter(document.values())) or {}

    world = WorldState()
    for scene_name, scene_payload in document.items():
        world.scenes[scene_name] = _parse_scene(scene_name, scene_payload)
    return world


def _is_envelope(document: Dict[str, Any]) -> bool:
    """Tell a ``Worlds`` envelope from a lone scene that is named ``Worlds``.

    A scene object only holds per-kind members, an envelope holds scenes.
    """

    if len(document) != 1:
        return False
    key, inner = next(iter(document.items()))
    if key.lower() != WORLDS_ENVELOPE.lower():
        return False
    if inner is None:
        return True
    if not isinstance(inner, dict):
        raise ParseError(f"'{key}' must be a JSON object")
    return not inner or not all(member.lower() in _KIND_MEMBERS for member in inner)


def _member(payload: Mapping[str, Any], name: str, default: Any = None) -> Any:
    if name in payload:
        return payload[name]
    folded = name.lower()
    for key, value in payload.items():
        if key.lower() == folded:
            return value
    return default


def _parse_scene(scene_name: str, payload: Any) -> SceneData:
    if not isinstance(payload, dict):
        raise ParseError(f"Scene {scene_name!r} must be a JSON object")
    scene = SceneData()
    for kind in EntityKind:
        entities = _member(payload, kind.value)
        if entities is None:
            continue
        if not isinstance(entities, dict):
            raise ParseError(f"{scene_name}.{kind.value} must be a JSON object")
        for key, entity_payload in entities.items():
            scene.add(_parse_entity(kind, scene_name, key, entity_payload))
    return scene


def _parse_entity(kind: EntityKind, scene_name: str, key: Any, payload: Any) -> EntityRecord:
    where = f"{scene_name}.{kind.value}[{key[:32]}]"
    if not isinstance(payload, dict):
        raise ParseError(f"{where} must be a JSON object")

    entity_id = _parse_id(key, where)
    network_id = _member(payload, "NetworkId")
    if network_id is not None and _parse_id(network_id, where) != entity_id:
        raise ParseError(f"{where} has mismatching NetworkId {network_id!r}")

    fields: Dict[str, Any] = {
        "kind": kind,
        "id": entity_id,
        "x": _number(payload, "X", where),
        "y": _number(payload, "Y", where),
        "scene_name": _text(payload, "SceneName", where, default=scene_name),
    }
    if kind is EntityKind.PLAYER:
        fields["name"] = _text(payload, "Name", where, default="")
        fields["score"] = _integer(payload, "Score", where)
        fields["speed"] = _number(payload, "Speed", where)
    elif kind is EntityKind.BULLET:
        fields["owner_id"] = _parse_id(_member(payload, "OwnerId", 0), where)
    elif kind is EntityKind.NPC:
        fields["speed"] = _number(payload, "Speed", where)
    return EntityRecord(**fields)


def _parse_id(value: Any, where: str) -> int:
    if isinstance(value, bool):
        raise ParseError(f"{where}: invalid id {value!r}")
    if isinstance(value, str):
        if not (value.isascii() and value.isdigit()) or len(value) > _MAX_ID_DIGITS:
            raise ParseError(f"{where}: invalid id {value[:32]!r}")
        value = int(value)
    if not isinstance(value, int) or not 0 <= value <= constants.MAX_CLIENT_ID:
        raise ParseError(f"{where}: invalid id")
    return value


def _number(payload: Mapping[str, Any], name: str, where: str) -> float:
    value = _member(payload, name, 0.0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"{where}.{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ParseError(f"{where}.{name} is out of range") from exc
    if not math.isfinite(number):
        raise ParseError(f"{where}.{name} must be finite")
    return number


def _integer(payload: Mapping[str, Any], name: str, where: str) -> int:
    value = _member(payload, name, 0)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"{where}.{name} must be an integer, got {value!r}")
    return value


def _text(payload: Mapping[str, Any], name: str, where: str, default: str) -> str:
    value = _member(payload, name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ParseError(f"{where}.{name} must be a string, got {value!r}")
    return value
