"""Translate local input into commands for the server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .protocol import Command


@dataclass
class InputState:
    """Keys held during the current frame."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    action: bool = False


class InputManager:
    """Turn held keys into the command tokens sent this tick.

    Direction keys repeat every tick while held. The action key only fires
    on the tick it goes down.
    """

    def __init__(self) -> None:
        self._last_state = InputState()

    def update(self, state: InputState) -> List[Command]:
        commands: List[Command] = []
        if state.up:
            commands.append(Command.UP)
        if state.down:
            commands.append(Command.DOWN)
        if state.left:
            commands.append(Command.LEFT)
        if state.right:
            commands.append(Command.RIGHT)
        if state.action and not self._last_state.action:
            commands.append(Command.SPACE)
        self._last_state = state
        return commands
