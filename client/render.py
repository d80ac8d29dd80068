"""Pygame based renderer for the game client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import pygame

from .entities import EntityKind
from .reconciler import Create, Destroy, Effect, SceneChanged, Update

Color = Tuple[int, int, int]

SELF_COLOR: Color = (70, 130, 255)
PLAYER_COLOR: Color = (230, 70, 70)
KIND_COLORS: Dict[EntityKind, Color] = {
    EntityKind.BULLET: (255, 200, 90),
    EntityKind.STAR: (255, 230, 120),
    EntityKind.NPC: (80, 200, 110),
}
KIND_RADIUS: Dict[EntityKind, int] = {
    EntityKind.PLAYER: 12,
    EntityKind.BULLET: 4,
    EntityKind.STAR: 6,
    EntityKind.NPC: 10,
}


@dataclass
class Sprite:
    """Materialised entity drawn every frame."""

    kind: EntityKind
    id: int
    x: float
    y: float
    color: Color
    label: str = ""


class Renderer:
    """Applies reconciliation effects and draws the resulting sprites."""

    def __init__(self, screen: pygame.Surface, scale: float = 32.0) -> None:
        self.screen = screen
        self.scale = scale
        self.font = pygame.font.SysFont("arial", 18)
        self.hud_font = pygame.font.SysFont("arial", 16)
        self.background_color = (20, 24, 28)
        self.sprites: Dict[Tuple[EntityKind, int], Sprite] = {}
        self.scene_name = ""

    def apply(self, effects: List[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Create):
                if effect.kind is EntityKind.PLAYER:
                    color = SELF_COLOR if effect.is_self else PLAYER_COLOR
                else:
                    color = KIND_COLORS[effect.kind]
                self.sprites[(effect.kind, effect.id)] = Sprite(
                    effect.kind,
                    effect.id,
                    effect.x,
                    effect.y,
                    color,
                    label=str(effect.fields.get("name") or ""),
                )
            elif isinstance(effect, Update):
                sprite = self.sprites.get((effect.kind, effect.id))
                if sprite is not None:
                    sprite.x = effect.x
                    sprite.y = effect.y
                    if "name" in effect.fields:
                        sprite.label = str(effect.fields["name"] or "")
            elif isinstance(effect, Destroy):
                self.sprites.pop((effect.kind, effect.id), None)
            elif isinstance(effect, SceneChanged):
                self.load_scene(effect.scene_name)

    def load_scene(self, scene_name: str) -> None:
        self.sprites.clear()
        self.scene_name = scene_name

    def clear(self) -> None:
        self.screen.fill(self.background_color)

    def _to_screen(self, x: float, y: float) -> Tuple[int, int]:
        center_x = self.screen.get_width() / 2
        center_y = self.screen.get_height() / 2
        # World y grows upwards.
        return int(center_x + x * self.scale), int(center_y - y * self.scale)

    def draw_sprites(self) -> None:
        for sprite in self.sprites.values():
            position = self._to_screen(sprite.x, sprite.y)
            pygame.draw.circle(self.screen, sprite.color, position, KIND_RADIUS[sprite.kind])
            if sprite.label:
                label = self.font.render(sprite.label, True, (255, 255, 255))
                self.screen.blit(label, (position[0] - label.get_width() / 2, position[1] - 32))

    def draw_hud(self, scoreboard: List[Tuple[str, int]]) -> None:
        if self.scene_name:
            title = self.hud_font.render(self.scene_name, True, (255, 255, 255))
            self.screen.blit(title, (20, 20))
        x = self.screen.get_width() - 200
        y = 20
        for name, score in scoreboard:
            surface = self.hud_font.render(f"{name} - {score}", True, (220, 220, 220))
            self.screen.blit(surface, (x, y))
            y += 18

    def present(self) -> None:
        pygame.display.flip()
