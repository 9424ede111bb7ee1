"""Block graph: nodes, stacks and the flatten/represent passes.

A ``Block`` is one node of a script. Its ``kind`` decides how it is rendered
(see ``inputs.NodeKind``). Stacks are ordered lists of sibling blocks; ``next``
and ``parent`` links are only valid after ``BlockStack.flatten_into`` has run.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Union

from .errors import BlockAlreadyAttachedError, EmptyStackError, UnresolvedPlaceholderError, UsageError
from .ids import make_id
from .inputs import (
    Field,
    LiteralKind,
    NodeKind,
    Socket,
    VlbVariant,
    is_independent,
    is_shadow_expression,
    make_socket,
    represent_alone,
    represent_field,
    represent_socket,
)

if TYPE_CHECKING:
    from .script import StackBuilder
    from .targets import Target

Handler = Callable[[Optional["Block"]], "Block"]
Resolver = Callable[["Target"], "Block"]


class Block:
    """One node of the block graph."""

    def __init__(self, opcode: Optional[str], kind: NodeKind = NodeKind.COMMAND) -> None:
        self.opcode = opcode
        self.kind = kind
        self._id: Optional[str] = None
        self.next: Optional[Block] = None
        self.parent: Optional[str] = None
        self.top_level = kind is NodeKind.HAT
        self.shadow = kind in (NodeKind.SHADOW, NodeKind.LITERAL, NodeKind.PLACEHOLDER)
        self.inputs: Dict[str, Socket] = {}
        self.stacks: Dict[str, BlockStack] = {}
        self.fields: Dict[str, Any] = {}
        self.mutation: Dict[str, Any] = {}
        # literal text or declaration name
        self.value: Optional[str] = None
        self.literal_kind: Optional[LiteralKind] = None
        self.variant: Optional[VlbVariant] = None
        self.resolver: Optional[Resolver] = None
        # hat blocks own the script they start, themselves first
        self.script: Optional[BlockStack] = None
        self.set_handler: Optional[Handler] = None
        self.change_handler: Optional[Handler] = None
        self.attached = False

    def __repr__(self) -> str:
        label = self.opcode if self.value is None else f"{self.opcode}={self.value!r}"
        return f"<Block {self.kind.value} {label}>"

    @property
    def id(self) -> str:
        if self._id is None:
            self._id = make_id()
        return self._id

    @id.setter
    def id(self, value: str) -> None:
        if self._id is not None:
            raise UsageError("Block id is already fixed", f"opcode {self.opcode} has id {self._id}")
        self._id = value

    @property
    def name(self) -> Optional[str]:
        return self.value

    @property
    def independent(self) -> bool:
        return is_independent(self)

    @property
    def is_shadow_expression(self) -> bool:
        return is_shadow_expression(self)

    @property
    def settable(self) -> bool:
        return self.set_handler is not None or self.change_handler is not None

    # -- construction -----------------------------------------------------

    def with_expression(
        self,
        name: str,
        expression: Optional["Block"] = None,
        default: Optional["Block"] = None,
    ) -> "Block":
        self.inputs[name] = make_socket(expression, default)
        return self

    def with_field(self, name: str, field: Any) -> "Block":
        if isinstance(field, str):
            field = Field(field)
        self.fields[name] = field
        return self

    def with_stack(self, name: str, stack: "BlockStack") -> "Block":
        self.stacks[name] = stack
        return self

    def with_mutation(self, name: str, value: Any = None) -> "Block":
        self.mutation[name] = value
        return self

    def with_default_mutation(self) -> "Block":
        return self.with_mutation("tagName", "mutation").with_mutation("children", [])

    def with_set_handler(self, handler: Handler) -> "Block":
        self.set_handler = handler
        return self

    def with_change_handler(self, handler: Handler) -> "Block":
        self.change_handler = handler
        return self

    def change_shadow_opcode(self, opcode: Optional[str]) -> "Block":
        """Retarget a menu shadow to another menu opcode, e.g. goto vs glide."""
        if self.kind is NodeKind.SHADOW and self.opcode is None:
            self.opcode = opcode
        return self

    def retyped(self, literal_kind: LiteralKind) -> "Block":
        """Copy of this literal carrying another literal subtype."""
        return literal(self.value, literal_kind)

    def field_value(self) -> Field:
        if self.kind is NodeKind.REFERENCE:
            return Field(self.value, self.id)
        return Field(self.value or "")

    # -- passes -----------------------------------------------------------

    def prepare(self, target: "Target") -> None:
        """Resolve placeholders below this block against the final target state."""
        for socket in self.inputs.values():
            socket.value = resolve_placeholder(socket.value, target)
            socket.default = resolve_placeholder(socket.default, target)
            for part in socket.parts():
                part.prepare(target)
        for stack in self.stacks.values():
            stack.prepare(target)
        if self.script is not None:
            self.script.prepare(target)

    def flatten_into(self, table: Dict[str, "Block"], parent_id: Optional[str] = None) -> None:
        if self.kind is NodeKind.PLACEHOLDER:
            raise UnresolvedPlaceholderError(
                "Placeholder reached the block table", f"opcode {self.opcode}"
            )
        if table.get(self.id) is self:
            raise BlockAlreadyAttachedError(
                "Block is used in more than one place", "clone it for each use"
            )
        self.parent = parent_id
        table[self.id] = self
        for socket in self.inputs.values():
            for part in socket.parts():
                if part.independent:
                    part.flatten_into(table, self.id)
        for stack in self.stacks.values():
            stack.flatten_into(table, self.id)

    def represent_inputs(self) -> Dict[str, Any]:
        inputs: Dict[str, Any] = {}
        for name, socket in self.inputs.items():
            entry = represent_socket(socket)
            if entry is not None:
                inputs[name] = entry
        for name, stack in self.stacks.items():
            if stack.is_empty():
                continue
            inputs[name] = [2, stack.id]
        return inputs

    def represent_fields(self) -> Dict[str, Any]:
        return {
            name: represent_field(field)
            for name, field in self.fields.items()
            if field is not None
        }

    def represent(self) -> Dict[str, Any]:
        block_entry: Dict[str, Any] = {
            "inputs": self.represent_inputs(),
            "fields": self.represent_fields(),
        }
        mutation = {name: value for name, value in self.mutation.items() if value is not None}
        if mutation:
            block_entry["mutation"] = mutation
        block_entry["topLevel"] = self.top_level
        block_entry["next"] = self.next.id if self.next is not None else None
        block_entry["parent"] = self.parent
        block_entry["shadow"] = self.shadow
        block_entry["opcode"] = self.opcode
        if self.top_level:
            block_entry["x"] = 0
            block_entry["y"] = 0
        return block_entry

    def represent_alone(self) -> Any:
        return represent_alone(self)

    def clone(self) -> "Block":
        """Deep structural copy with fresh ids. Declarations are shared."""
        if self.kind is NodeKind.REFERENCE:
            return self
        if self.kind is NodeKind.LITERAL:
            return literal(self.value, self.literal_kind)
        cloned = Block(self.opcode, self.kind)
        cloned.shadow = self.shadow
        cloned.value = self.value
        cloned.resolver = self.resolver
        cloned.fields = dict(self.fields)
        cloned.mutation = dict(self.mutation)
        cloned.set_handler = self.set_handler
        cloned.change_handler = self.change_handler
        cloned.inputs = {
            name: Socket(
                socket.value.clone() if socket.value is not None else None,
                socket.default.clone() if socket.default is not None else None,
            )
            for name, socket in self.inputs.items()
        }
        cloned.stacks = {name: stack.clone() for name, stack in self.stacks.items()}
        if self.script is not None:
            cloned.script = BlockStack()
            cloned.script.add_block(cloned)
            for block in self.script.contents[1:]:
                cloned.script.add_block(block.clone())
        return cloned


class BlockStack:
    """An ordered run of sibling blocks: a script body or a branch."""

    def __init__(self, contents: Optional[List[Block]] = None) -> None:
        self.contents: List[Block] = []
        for block in contents or []:
            self.add_block(block)

    def __len__(self) -> int:
        return len(self.contents)

    def is_empty(self) -> bool:
        return not self.contents

    @property
    def id(self) -> Optional[str]:
        """The id the stack is referenced by: that of its first block."""
        return self.contents[0].id if self.contents else None

    def add_block(self, block: Block) -> Block:
        if block.attached:
            raise BlockAlreadyAttachedError(
                "Block is already part of a stack", f"opcode {block.opcode}"
            )
        block.attached = True
        self.contents.append(block)
        return block

    def prepare(self, target: "Target") -> None:
        for block in self.contents:
            if block.kind is NodeKind.HAT:
                continue
            block.prepare(target)

    def flatten_into(self, table: Dict[str, Block], parent_id: Optional[str] = None) -> None:
        followers: List[Optional[Block]] = list(self.contents[1:]) + [None]
        for block, following in zip(self.contents, followers):
            block.next = following
            block.flatten_into(table, parent_id)

    def clone(self) -> "BlockStack":
        return BlockStack([block.clone() for block in self.contents])


class IsolatedStack:
    """A script without a hat block; its first block becomes the top of the script."""

    def __init__(self, stack: BlockStack) -> None:
        self.script = stack

    @property
    def first(self) -> Block:
        if self.script.is_empty():
            raise EmptyStackError("Isolated stack has no blocks", "add blocks before using it")
        return self.script.contents[0]

    @property
    def id(self) -> str:
        return self.first.id

    @id.setter
    def id(self, value: str) -> None:
        self.first.id = value

    @property
    def opcode(self) -> Optional[str]:
        return self.first.opcode

    @property
    def top_level(self) -> bool:
        return True

    def add_block(self, block: Block) -> Block:
        return self.script.add_block(block)

    def prepare(self, target: "Target") -> None:
        self.first.top_level = True
        self.script.prepare(target)

    def represent(self) -> Dict[str, Any]:
        return self.first.represent()

    def clone(self) -> "IsolatedStack":
        return IsolatedStack(self.script.clone())


Script = Union[Block, IsolatedStack]


def resolve_placeholder(block: Optional[Block], target: "Target") -> Optional[Block]:
    if block is None or block.kind is not NodeKind.PLACEHOLDER:
        return block
    return block.resolver(target)


def command(opcode: Optional[str]) -> Block:
    return Block(opcode, NodeKind.COMMAND)


def reporter(opcode: Optional[str]) -> Block:
    return Block(opcode, NodeKind.REPORTER)


def shadow_reporter(opcode: Optional[str]) -> Block:
    return Block(opcode, NodeKind.SHADOW)


def container(opcode: str, **stacks: BlockStack) -> Block:
    block = Block(opcode, NodeKind.CONTAINER)
    for name, stack in stacks.items():
        block.with_stack(name, stack)
    return block


def hat(opcode: str) -> Block:
    block = Block(opcode, NodeKind.HAT)
    block.script = BlockStack([block])
    return block


def placeholder(opcode: Optional[str], resolver: Resolver) -> Block:
    block = Block(opcode, NodeKind.PLACEHOLDER)
    block.resolver = resolver
    return block


def literal(value: Any, kind: LiteralKind = LiteralKind.TEXT) -> Block:
    block = Block(kind.opcode, NodeKind.LITERAL)
    block.value = str(value)
    block.literal_kind = kind
    return block


def number(value: Any) -> Block:
    return literal(value, LiteralKind.NUMBER)


def positive_number(value: Any) -> Block:
    return literal(value, LiteralKind.POSITIVE_NUMBER)


def whole_number(value: Any) -> Block:
    return literal(value, LiteralKind.POSITIVE_INTEGER)


def integer(value: Any) -> Block:
    return literal(value, LiteralKind.INTEGER)


def angle(value: Any) -> Block:
    return literal(value, LiteralKind.ANGLE)


def color(value: str) -> Block:
    return literal(value, LiteralKind.COLOR)


def text(value: Any) -> Block:
    return literal(value, LiteralKind.TEXT)


def as_expression(value: Any) -> Optional[Block]:
    """Accept plain Python values wherever an expression is expected."""
    if value is None or isinstance(value, Block):
        return value
    if isinstance(value, bool):
        return text(str(value).lower())
    if isinstance(value, (int, float, str)):
        return text(value)
    to_block = getattr(value, "as_block", None)
    if to_block is not None:
        return to_block()
    raise TypeError(f"Cannot use {type(value).__name__} as an expression")


def create_block_stack(callback: Callable[["StackBuilder"], Any]) -> BlockStack:
    """Build a stack that is not attached to any script yet."""
    from .script import StackBuilder

    stack = BlockStack()
    callback(StackBuilder(stack))
    return stack
