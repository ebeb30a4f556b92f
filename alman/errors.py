# alman/errors.py


class AlmanError(Exception):
    """Base class for errors surfaced to the user."""


class StateLoadError(AlmanError):
    """A persisted state file exists but cannot be used."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class AliasNotFound(AlmanError):
    def __init__(self, alias: str):
        super().__init__(f"alias '{alias}' not found")
        self.alias = alias


class AliasExists(AlmanError):
    def __init__(self, alias: str):
        super().__init__(f"alias '{alias}' already exists")
        self.alias = alias
