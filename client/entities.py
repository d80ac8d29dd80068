"""Client side entity representations mirroring the server world state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class EntityKind(str, Enum):
    """Closed set of replicated entity kinds.

    The value is the member name of the per-kind mapping in a scene document.
    """

    PLAYER = "Players"
    BULLET = "Bullets"
    STAR = "Stars"
    NPC = "Npcs"


KIND_FIELDS: Dict[EntityKind, Tuple[str, ...]] = {
    EntityKind.PLAYER: ("name", "score", "speed"),
    EntityKind.BULLET: ("owner_id",),
    EntityKind.STAR: (),
    EntityKind.NPC: ("speed",),
}


@dataclass(frozen=True)
class EntityRecord:
    """One entity as described by a single snapshot."""

    kind: EntityKind
    id: int
    x: float
    y: float
    scene_name: str
    name: Optional[str] = None
    score: Optional[int] = None
    speed: Optional[float] = None
    owner_id: Optional[int] = None

    def kind_fields(self) -> Dict[str, Any]:
        """Return the fields specific to this record's kind."""

        return {name: getattr(self, name) for name in KIND_FIELDS[self.kind]}


@dataclass
class SceneData:
    """Entities of one scene, one id mapping per kind."""

    entities: Dict[EntityKind, Dict[int, EntityRecord]] = field(
        default_factory=lambda: {kind: {} for kind in EntityKind}
    )

    def of_kind(self, kind: EntityKind) -> Dict[int, EntityRecord]:
        return self.entities.setdefault(kind, {})

    def add(self, record: EntityRecord) -> None:
        self.of_kind(record.kind)[record.id] = record

    def __len__(self) -> int:
        return sum(len(mapping) for mapping in self.entities.values())


@dataclass
class WorldState:
    """A complete authoritative snapshot, keyed by scene name."""

    scenes: Dict[str, SceneData] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.scenes

    def records(self, kind: EntityKind) -> Iterator[EntityRecord]:
        """Yield every record of ``kind`` across all scenes."""

        for scene in self.scenes.values():
            yield from scene.of_kind(kind).values()

    def players(self) -> Iterator[EntityRecord]:
        return self.records(EntityKind.PLAYER)

    def scoreboard(self) -> List[Tuple[str, int]]:
        """Return ``(name, score)`` for every player, ordered by name.

        Players sharing a name collapse into a single row holding the score
        seen last.
        """

        scores: Dict[str, int] = {}
        for player in self.players():
            scores[player.name or ""] = player.score or 0
        return sorted(scores.items())
