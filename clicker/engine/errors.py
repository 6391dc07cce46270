"""Exceptions for programmer errors and unrecoverable save conditions.

Expected refusals (can't afford, level gate, prestige not ready) are never
raised; they come back as a ``False`` success flag.
"""


class ClickerError(Exception):
    """Base exception for the clicker core."""


class RegistryError(ClickerError):
    """Raised when a static registry is built inconsistently."""


class DuplicateIdError(RegistryError):
    """Raised when an id is registered twice in the same registry."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"duplicate {kind} id: {item_id!r}")
        self.kind = kind
        self.item_id = item_id


class RegistrySealedError(RegistryError):
    """Raised when registering into a registry that has been sealed."""


class SaveError(ClickerError):
    """Base exception for save/load errors."""


class SaveVersionError(SaveError):
    """Raised when a save file was written by a newer schema version."""

    def __init__(self, version: int, current: int) -> None:
        super().__init__(f"save file version {version} is newer than current version {current}")
        self.version = version
        self.current = current
