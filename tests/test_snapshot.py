"""Tests for the world state deserializer."""

import json

import pytest

from builders import entity, snapshot_json

from client.entities import EntityKind
from client.errors import ParseError
from client.snapshot import parse_world_state


def test_parses_every_kind_with_kind_specific_fields() -> None:
    world = parse_world_state(
        snapshot_json(
            {
                "Town": {
                    "Players": {7: entity(7, 1.5, -2, "Town", Name="ann", Score=4, Speed=2.5)},
                    "Bullets": {11: entity(11, 3, 3, "Town", OwnerId=7)},
                    "Stars": {20: entity(20, 0, 0, "Town")},
                    "Npcs": {30: entity(30, 8, 9, "Town", Speed=0.5)},
                }
            }
        )
    )

    scene = world.scenes["Town"]
    player = scene.of_kind(EntityKind.PLAYER)[7]
    assert (player.x, player.y, player.scene_name) == (1.5, -2.0, "Town")
    assert player.kind_fields() == {"name": "ann", "score": 4, "speed": 2.5}
    assert scene.of_kind(EntityKind.BULLET)[11].kind_fields() == {"owner_id": 7}
    assert scene.of_kind(EntityKind.STAR)[20].kind_fields() == {}
    assert scene.of_kind(EntityKind.NPC)[30].kind_fields() == {"speed": 0.5}
    assert len(scene) == 4


def test_accepts_worlds_envelope() -> None:
    payload = json.dumps({"Worlds": {"Town": {"Players": {"1": entity(1, 0, 0, "Town")}}}})

    world = parse_world_state(payload)

    assert list(world.scenes) == ["Town"]
    assert 1 in world.scenes["Town"].of_kind(EntityKind.PLAYER)


def test_missing_members_take_defaults() -> None:
    payload = json.dumps({"Town": {"Players": {"5": {"X": 1, "Y": 1}}}})

    player = parse_world_state(payload).scenes["Town"].of_kind(EntityKind.PLAYER)[5]

    assert player.scene_name == "Town"
    assert player.name == ""
    assert player.score == 0
    assert player.speed == 0.0


def test_empty_document_is_an_empty_world() -> None:
    assert parse_world_state("{}").is_empty()


@pytest.mark.parametrize(
    "payload",
    [
        "{broken",
        "[]",
        '{"Town": []}',
        '{"Town": {"Players": []}}',
        '{"Town": {"Players": {"x1": {"X": 0, "Y": 0}}}}',
        '{"Town": {"Players": {"-1": {"X": 0, "Y": 0}}}}',
        '{"Town": {"Players": {"1": {"X": "0", "Y": 0}}}}',
        '{"Town": {"Players": {"1": {"X": true, "Y": 0}}}}',
        '{"Town": {"Players": {"1": {"X": 0, "Y": 0, "SceneName": 3}}}}',
        '{"Town": {"Players": {"1": {"X": 0, "Y": 0, "Score": 1.5}}}}',
        '{"Town": {"Players": {"1": {"NetworkId": 2, "X": 0, "Y": 0}}}}',
        '{"Town": {"Bullets": {"1": {"X": 0, "Y": 0, "OwnerId": -4}}}}',
        '{"Worlds": 3}',
        '{"Town": {"Players": {"1": {"X": 1' + "0" * 400 + ', "Y": 0}}}}',
        '{"Town": {"Players": {"1": {"X": 1e400, "Y": 0}}}}',
        "[" * 100_000,
        '{"Town": {"Npcs": {"' + "1" * 5000 + '": {"X": 0, "Y": 0}}}}',
        '{"Town": {"Npcs": {"1": {"NetworkId": ' + "1" * 5000 + ', "X": 0, "Y": 0}}}}',
    ],
)
def test_malformed_documents_raise_parse_error(payload: str) -> None:
    with pytest.raises(ParseError):
        parse_world_state(payload)


def test_scoreboard_orders_players_by_name() -> None:
    world = parse_world_state(
        snapshot_json(
            {
                "Town": {"Players": {1: entity(1, 0, 0, "Town", Name="zed", Score=2)}},
                "Cave": {"Players": {2: entity(2, 0, 0, "Cave", Name="amy", Score=9)}},
            }
        )
    )

    assert world.scoreboard() == [("amy", 9), ("zed", 2)]


def test_member_names_match_case_insensitively() -> None:
    payload = json.dumps(
        {"Town": {"players": {"4": {"networkId": 4, "x": 2, "y": 3, "sceneName": "Town", "name": "low"}}}}
    )

    player = parse_world_state(payload).scenes["Town"].of_kind(EntityKind.PLAYER)[4]

    assert (player.x, player.y, player.name) == (2.0, 3.0, "low")


def test_exact_case_member_wins() -> None:
    payload = json.dumps({"Town": {"Npcs": {"1": {"x": 9, "X": 1, "Y": 0}}}})

    npc = parse_world_state(payload).scenes["Town"].of_kind(EntityKind.NPC)[1]

    assert npc.x == 1.0


def test_lone_scene_named_worlds_is_not_an_envelope() -> None:
    payload = json.dumps({"Worlds": {"Players": {"1": entity(1, 0, 0, "Worlds")}}})

    world = parse_world_state(payload)

    assert list(world.scenes) == ["Worlds"]
    assert 1 in world.scenes["Worlds"].of_kind(EntityKind.PLAYER)
