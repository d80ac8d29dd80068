"""Tick driven synchronisation session tying the client components together."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from . import constants
from .entities import WorldState
from .errors import ConnectionFailure, DecodeError, ParseError, ProtocolError
from .framing import FrameDecoder
from .network import Connection
from .protocol import Command, encode_command
from .reconciler import Effect, EntityReconciler, SceneChanged
from .router import MessageRouter
from .snapshot import parse_world_state

logger = logging.getLogger(__name__)

EffectSink = Callable[[List[Effect]], None]
SceneLoader = Callable[[str], None]


class SyncClient:
    """Mirror the server's world state for one player session.

    The instance is created by whatever drives the game loop and advanced by
    calling :meth:`tick` once per frame. All state lives on the instance and is
    only touched from that loop.
    """

    def __init__(
        self,
        host: str = constants.DEFAULT_HOST,
        port: int = constants.DEFAULT_PORT,
        active_scene: str = constants.DEFAULT_SCENE,
        effect_sink: Optional[EffectSink] = None,
        scene_loader: Optional[SceneLoader] = None,
        connection: Optional[Connection] = None,
    ) -> None:
        self.connection = connection or Connection(host, port)
        self.decoder = FrameDecoder()
        self.router = MessageRouter(
            on_snapshot=self.handle_snapshot,
            on_identity=self.assign_identity,
        )
        self.reconciler = EntityReconciler()
        self.world_state = WorldState()
        self.client_id: Optional[int] = None
        self.active_scene = active_scene
        self.effect_sink = effect_sink
        self.scene_loader = scene_loader
        self._effects: List[Effect] = []
        self._connect_task: Optional[asyncio.Task[None]] = None

    def start(self) -> asyncio.Task[None]:
        """Begin connecting in the background and return the connect task."""

        if self._connect_task is None:
            self._connect_task = asyncio.create_task(self._connect())
        return self._connect_task

    async def _connect(self) -> None:
        try:
            await self.connection.connect()
        except ConnectionFailure as exc:
            logger.warning("Client left disconnected: %s", exc)

    def tick(self) -> List[Effect]:
        """Service at most one received chunk and return the resulting effects."""

        chunk = self.connection.poll()
        if chunk is None:
            return []
        effects = self.receive(chunk)
        if effects and self.effect_sink is not None:
            self.effect_sink(effects)
        return effects

    def receive(self, chunk: bytes) -> List[Effect]:
        """Route every message completed by ``chunk`` in delimiter order."""

        self._effects = []
        try:
            for message in self.decoder.feed(chunk):
                self.router.route(message)
        except DecodeError as exc:
            logger.warning("%s", exc)
        effects, self._effects = self._effects, []
        return effects

    def handle_snapshot(self, payload: str) -> None:
        try:
            world = parse_world_state(payload)
        except ParseError as exc:
            logger.warning("Snapshot dropped, keeping previous world state: %s", exc)
            return
        self.world_state = world
        effects = self.reconciler.reconcile(world, self.client_id, self.active_scene)
        for effect in effects:
            if isinstance(effect, SceneChanged):
                self._change_scene(effect.scene_name)
        self._effects.extend(effects)

    def _change_scene(self, scene_name: str) -> None:
        logger.info("Scene changed from %s to %s", self.active_scene, scene_name)
        self.active_scene = scene_name
        if self.scene_loader is not None:
            self.scene_loader(scene_name)

    def assign_identity(self, client_id: int) -> None:
        if self.client_id is None:
            self.client_id = client_id
            logger.info("Client id: %s", client_id)
        elif self.client_id != client_id:
            raise ProtocolError(
                f"Client id {client_id} ignored, already assigned {self.client_id}"
            )

    def send_command(self, command: Command) -> bool:
        """Send one command token. Failures are logged, never raised."""

        try:
            self.connection.send(encode_command(command))
        except ConnectionFailure as exc:
            logger.debug("Command %s not sent: %s", command.value, exc)
            return False
        return True

    def send_commands(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.send_command(command)

    def scoreboard(self) -> List[Tuple[str, int]]:
        return self.world_state.scoreboard()

    def close(self) -> None:
        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
        self.connection.close()

    async def aclose(self) -> None:
        self.close()
        await self.connection.wait_closed()
