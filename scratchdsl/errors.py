"""Exceptions raised while building or serializing a project."""


class ScratchDslError(Exception):
    """Base exception for scratchdsl failures."""

    def __init__(self, message: str, detail: str = ""):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class UsageError(ScratchDslError):
    """The building code used the library incorrectly."""


class DuplicateNameError(UsageError):
    """A variable, list or broadcast name is already taken in its scope."""


class EmptyStackError(UsageError):
    """An isolated stack was promoted or represented without any blocks."""


class UnresolvedPlaceholderError(UsageError):
    """A placeholder default could not be resolved against its target."""


class BlockAlreadyAttachedError(UsageError):
    """A block instance was added to a second stack position."""


class NotSettableError(UsageError):
    """An expression without set/change handlers was used as a setter."""


class UnsupportedOperationError(ScratchDslError, NotImplementedError):
    """The requested operation is not supported by the builder."""


class AssetNotFoundError(ScratchDslError):
    """Asset bytes could not be located for packaging."""
