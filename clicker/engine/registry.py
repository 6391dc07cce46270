"""Static registries — worlds and achievements, built once at boot.

Registries keep insertion order, reject duplicate ids, and become read-only
once sealed. No locking is needed: registration happens during bootstrap
and everything afterwards only reads.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterable, Iterator, TypeVar

from clicker.data.achievements import DEFAULT_ACHIEVEMENTS, Achievement
from clicker.data.worlds import ALL_WORLDS, WorldDef
from clicker.engine.errors import DuplicateIdError, RegistrySealedError

T = TypeVar("T")


class Registry(Generic[T]):
    """Ordered id → item lookup that fails fast on duplicates."""

    kind = "item"

    def __init__(self, key: Callable[[T], str], kind: str | None = None) -> None:
        if kind is not None:
            self.kind = kind
        self._key = key
        self._items: dict[str, T] = {}
        self._sealed = False

    def register(self, item: T) -> None:
        if self._sealed:
            raise RegistrySealedError(f"{self.kind} registry is sealed")
        item_id = self._key(item)
        if item_id in self._items:
            raise DuplicateIdError(self.kind, item_id)
        self._items[item_id] = item

    def register_all(self, items: Iterable[T]) -> None:
        for item in items:
            self.register(item)

    def seal(self) -> None:
        """Make the registry read-only for the rest of the process."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, item_id: str) -> T | None:
        return self._items.get(item_id)

    def list(self) -> list[T]:
        """All items in registration order."""
        return list(self._items.values())

    def ids(self) -> list[str]:
        return list(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)


class WorldRegistry(Registry[WorldDef]):
    """Static world definitions keyed by world id."""

    kind = "world"

    def __init__(self, worlds: Iterable[WorldDef] = ()) -> None:
        super().__init__(lambda w: w.id)
        self.register_all(worlds)


class AchievementRegistry(Registry[Achievement]):
    """Achievement catalog, evaluated in registration order."""

    kind = "achievement"

    def __init__(self, achievements: Iterable[Achievement] = ()) -> None:
        super().__init__(lambda a: a.id)
        self.register_all(achievements)


def default_world_registry() -> WorldRegistry:
    """A sealed registry of the built-in worlds."""
    reg = WorldRegistry(ALL_WORLDS)
    reg.seal()
    return reg


def default_achievement_registry() -> AchievementRegistry:
    """A sealed registry of the built-in achievements."""
    reg = AchievementRegistry(DEFAULT_ACHIEVEMENTS)
    reg.seal()
    return reg
