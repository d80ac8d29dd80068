"""Tests for translating held keys into command tokens."""

from client.input import InputManager, InputState
from client.protocol import Command, encode_command


def test_held_directions_repeat_every_tick() -> None:
    manager = InputManager()
    state = InputState(up=True, left=True)

    assert manager.update(state) == [Command.UP, Command.LEFT]
    assert manager.update(state) == [Command.UP, Command.LEFT]


def test_action_key_is_edge_triggered() -> None:
    manager = InputManager()

    assert manager.update(InputState(action=True)) == [Command.SPACE]
    assert manager.update(InputState(action=True)) == []
    assert manager.update(InputState()) == []
    assert manager.update(InputState(action=True, down=True)) == [Command.DOWN, Command.SPACE]


def test_no_keys_no_commands() -> None:
    assert InputManager().update(InputState()) == []


def test_commands_are_bare_newline_terminated_tokens() -> None:
    assert [encode_command(command) for command in Command] == [
        b"UP\n",
        b"DOWN\n",
        b"LEFT\n",
        b"RIGHT\n",
        b"SPACE\n",
    ]
