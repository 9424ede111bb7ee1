"""Identifier generation.

Ids are either random (the default) or produced by a counting generator for
reproducible output. The active generator lives in a context variable so that
each project carries its own policy instead of mutating process state.
"""

import secrets
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from .constants import ID_ALPHABET, ID_LENGTH


class IdGenerator:
    """Produces unique string ids, randomly or by counting up."""

    def __init__(self, deterministic: bool = False, counter: int = 0) -> None:
        self.deterministic = deterministic
        self.counter = counter

    @classmethod
    def counting(cls, start: int = 0) -> "IdGenerator":
        return cls(deterministic=True, counter=start)

    def make_id(self) -> str:
        if not self.deterministic:
            return self.make_random_id()
        name = ""
        residue = self.counter
        while True:
            name += ID_ALPHABET[residue % len(ID_ALPHABET)]
            residue //= len(ID_ALPHABET)
            if residue == 0:
                break
        self.counter += 1
        return name

    def make_random_id(self, length: int = ID_LENGTH) -> str:
        raw = secrets.token_bytes(length)
        return "".join(ID_ALPHABET[byte % len(ID_ALPHABET)] for byte in raw)


_random_generator = IdGenerator()
_active_generator: ContextVar[IdGenerator] = ContextVar(
    "scratchdsl_id_generator", default=_random_generator
)


def current_generator() -> IdGenerator:
    return _active_generator.get()


def make_id() -> str:
    return _active_generator.get().make_id()


@contextmanager
def use_id_generator(generator: IdGenerator) -> Iterator[IdGenerator]:
    """Make ``generator`` the source of ids for the enclosed block."""
    token = _active_generator.set(generator)
    try:
        yield generator
    finally:
        _active_generator.reset(token)
