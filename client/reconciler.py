"""Diff world snapshots against the locally materialised entity pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from .entities import EntityKind, EntityRecord, WorldState


@dataclass(frozen=True)
class Create:
    kind: EntityKind
    id: int
    x: float
    y: float
    fields: Dict[str, Any] = field(default_factory=dict)
    is_self: bool = False


@dataclass(frozen=True)
class Update:
    kind: EntityKind
    id: int
    x: float
    y: float
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Destroy:
    kind: EntityKind
    id: int


@dataclass(frozen=True)
class SceneChanged:
    scene_name: str


Effect = Union[Create, Update, Destroy, SceneChanged]


def is_local_player(kind: EntityKind, entity_id: int, client_id: Optional[int]) -> bool:
    """Return whether the entity is the player controlled by this client."""

    return kind is EntityKind.PLAYER and client_id is not None and entity_id == client_id


class LocalEntityPool:
    """Entities currently materialised in the active scene, per kind.

    Each entry holds the last record applied for the id.
    """

    def __init__(self) -> None:
        self._entries: Dict[EntityKind, Dict[int, EntityRecord]] = {
            kind: {} for kind in EntityKind
        }

    def of_kind(self, kind: EntityKind) -> Dict[int, EntityRecord]:
        return self._entries[kind]

    def get(self, kind: EntityKind, entity_id: int) -> Optional[EntityRecord]:
        return self._entries[kind].get(entity_id)

    def clear(self) -> None:
        for entries in self._entries.values():
            entries.clear()

    def contents(self) -> Dict[EntityKind, Dict[int, EntityRecord]]:
        """Return a copy of the pool for inspection."""

        return {kind: dict(entries) for kind, entries in self._entries.items()}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def __iter__(self) -> Iterator[EntityRecord]:
        for entries in self._entries.values():
            yield from entries.values()


class EntityReconciler:
    """Produce Create/Update/Destroy effects from consecutive snapshots.

    The reconciler is the only writer of its pool. A snapshot that moves the
    local player to another scene clears the pool and yields a single
    :class:`SceneChanged`; entity effects resume with the next snapshot.
    """

    def __init__(self, pool: Optional[LocalEntityPool] = None) -> None:
        self.pool = pool if pool is not None else LocalEntityPool()

    def reconcile(
        self, world: WorldState, client_id: Optional[int], active_scene: str
    ) -> List[Effect]:
        new_scene = self._detect_scene_change(world, client_id, active_scene)
        if new_scene is not None:
            self.pool.clear()
            return [SceneChanged(new_scene)]

        effects: List[Effect] = []
        for kind in EntityKind:
            effects.extend(self._reconcile_kind(kind, world, client_id, active_scene))
        return effects

    @staticmethod
    def _detect_scene_change(
        world: WorldState, client_id: Optional[int], active_scene: str
    ) -> Optional[str]:
        if client_id is None:
            return None
        for player in world.players():
            if player.id == client_id and player.scene_name != active_scene:
                return player.scene_name
        return None

    def _reconcile_kind(
        self,
        kind: EntityKind,
        world: WorldState,
        client_id: Optional[int],
        active_scene: str,
    ) -> List[Effect]:
        in_scene = {
            record.id: record
            for record in world.records(kind)
            if record.scene_name == active_scene
        }
        entries = self.pool.of_kind(kind)
        effects: List[Effect] = []

        for entity_id, record in in_scene.items():
            fields = record.kind_fields()
            if entity_id in entries:
                effects.append(Update(kind, entity_id, record.x, record.y, fields))
            else:
                effects.append(
                    Create(
                        kind,
                        entity_id,
                        record.x,
                        record.y,
                        fields,
                        is_self=is_local_player(kind, entity_id, client_id),
                    )
                )
            entries[entity_id] = record

        for entity_id in [entity_id for entity_id in entries if entity_id not in in_scene]:
            del entries[entity_id]
            effects.append(Destroy(kind, entity_id))
        return effects
