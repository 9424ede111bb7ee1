"""Variable, list and broadcast declarations.

Declarations are ``REFERENCE`` blocks. They never get a row of their own in
the block table; they render inline as ``[type_code, name, id]`` or as a field
``[name, id]``. Cloning a block shares its declarations.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .blocks import Block, command, number, text
from .ids import make_id
from .inputs import NodeKind, VlbVariant


def _declaration(name: str, variant: VlbVariant) -> Block:
    block = Block(None, NodeKind.REFERENCE)
    block.value = name
    block.variant = variant
    return block


def variable(name: str) -> Block:
    """A variable reference that can also be set and changed."""
    declared = _declaration(name, VlbVariant.VARIABLE)
    declared.with_set_handler(
        lambda value: command("data_setvariableto")
        .with_expression("VALUE", value, text("0"))
        .with_field("VARIABLE", declared)
    )
    declared.with_change_handler(
        lambda value: command("data_changevariableby")
        .with_expression("VALUE", value, number("1"))
        .with_field("VARIABLE", declared)
    )
    return declared


def scratch_list(name: str) -> Block:
    return _declaration(name, VlbVariant.LIST)


def broadcast(name: str) -> Block:
    return _declaration(name, VlbVariant.BROADCAST)


_FACTORIES = {
    VlbVariant.VARIABLE: variable,
    VlbVariant.LIST: scratch_list,
    VlbVariant.BROADCAST: broadcast,
}


def declare(name: str, variant: VlbVariant) -> Block:
    return _FACTORIES[variant](name)


@dataclass
class DeclarationSlot:
    """A declaration id reserved up front so several sprites can share it.

    Each sprite that adds the slot gets its own local declaration, all of them
    carrying the slot's id.
    """
    name: str
    variant: VlbVariant
    value: Any = ""
    cloud: bool = False
    _id: Optional[str] = field(default=None, repr=False)

    @property
    def id(self) -> str:
        if self._id is None:
            self._id = make_id()
        return self._id

    def as_block(self) -> Block:
        declared = declare(self.name, self.variant)
        declared.id = self.id
        return declared


def list_contents(values: Optional[List[Any]]) -> List[Any]:
    return list(values) if values is not None else []
