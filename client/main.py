"""Entry point for the pygame based client."""

from __future__ import annotations

import argparse
import asyncio
import logging

import pygame

from . import constants
from .input import InputManager, InputState
from .render import Renderer
from .session import SyncClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the scene-sync game client")
    parser.add_argument("--host", default=constants.DEFAULT_HOST, help="Server host")
    parser.add_argument("--port", type=int, default=constants.DEFAULT_PORT, help="Server port")
    parser.add_argument("--scene", default=constants.DEFAULT_SCENE, help="Initial scene name")
    parser.add_argument("--tick-rate", type=int, default=constants.TICK_RATE, help="Ticks per second")
    parser.add_argument("--width", type=int, default=1280, help="Window width")
    parser.add_argument("--height", type=int, default=720, help="Window height")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args()


def read_input_state() -> InputState:
    keys = pygame.key.get_pressed()
    return InputState(
        up=bool(keys[pygame.K_UP]),
        down=bool(keys[pygame.K_DOWN]),
        left=bool(keys[pygame.K_LEFT]),
        right=bool(keys[pygame.K_RIGHT]),
        action=bool(keys[pygame.K_SPACE]),
    )


def set_scene_caption(scene_name: str) -> None:
    pygame.display.set_caption(f"Scene Sync - {scene_name}")


async def run_client(args: argparse.Namespace) -> None:
    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    set_scene_caption(args.scene)
    renderer = Renderer(screen)
    renderer.load_scene(args.scene)
    clock = pygame.time.Clock()

    client = SyncClient(
        args.host,
        args.port,
        active_scene=args.scene,
        effect_sink=renderer.apply,
        scene_loader=set_scene_caption,
    )
    input_manager = InputManager()
    client.start()
    running = True

    try:
        while running:
            clock.tick(args.tick_rate)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False

            client.tick()
            if client.connection.connected:
                client.send_commands(input_manager.update(read_input_state()))

            renderer.clear()
            renderer.draw_sprites()
            renderer.draw_hud(client.scoreboard())
            renderer.present()
            await asyncio.sleep(0)
    finally:
        await client.aclose()
        pygame.quit()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="[%(levelname)s] %(message)s",
    )
    asyncio.run(run_client(args))


if __name__ == "__main__":
    main()
