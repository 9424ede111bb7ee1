"""Input and field value model.

Everything that can sit in a block socket is a ``Block`` tagged with a
``NodeKind``. This module owns the kind switch: which kinds get their own row
in the block table, which count as shadows, how each renders on its own, and
how a socket value combines with its default shadow into an input entry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from .constants import (
    ANGLE_NUM_PRIMITIVE,
    BROADCAST_PRIMITIVE,
    COLOR_PICKER_PRIMITIVE,
    INPUT_DIFF_BLOCK_SHADOW,
    INPUT_NO_SHADOW,
    INPUT_SAME_BLOCK_SHADOW,
    INTEGER_NUM_PRIMITIVE,
    LIST_PRIMITIVE,
    MATH_NUM_PRIMITIVE,
    POSITIVE_NUM_PRIMITIVE,
    TEXT_PRIMITIVE,
    VAR_PRIMITIVE,
    WHOLE_NUM_PRIMITIVE,
)

if TYPE_CHECKING:
    from .blocks import Block


class NodeKind(Enum):
    """Shape of a block node."""
    COMMAND = "command"
    CONTAINER = "container"
    HAT = "hat"
    REPORTER = "reporter"
    SHADOW = "shadow"
    LITERAL = "literal"
    REFERENCE = "reference"
    PLACEHOLDER = "placeholder"


class LiteralKind(Enum):
    """Literal subtypes with their shadow opcode and type code."""
    NUMBER = ("math_number", MATH_NUM_PRIMITIVE)
    POSITIVE_NUMBER = ("math_positive_number", POSITIVE_NUM_PRIMITIVE)
    POSITIVE_INTEGER = ("math_whole_number", WHOLE_NUM_PRIMITIVE)
    INTEGER = ("math_integer", INTEGER_NUM_PRIMITIVE)
    ANGLE = ("math_angle", ANGLE_NUM_PRIMITIVE)
    COLOR = ("colour_picker", COLOR_PICKER_PRIMITIVE)
    TEXT = ("text", TEXT_PRIMITIVE)

    @property
    def opcode(self) -> str:
        return self.value[0]

    @property
    def type_code(self) -> int:
        return self.value[1]


class VlbVariant(Enum):
    """Declaration variants with their type code."""
    VARIABLE = VAR_PRIMITIVE
    LIST = LIST_PRIMITIVE
    BROADCAST = BROADCAST_PRIMITIVE

    @property
    def type_code(self) -> int:
        return self.value


@dataclass(frozen=True)
class Field:
    """A block-local selection: a display value and an optional declaration id."""
    value: str
    id: Optional[str] = None


@dataclass
class Socket:
    """An expression input: the supplied value and the shadow shown beneath it."""
    value: Optional["Block"] = None
    default: Optional["Block"] = None

    def parts(self) -> List["Block"]:
        return [part for part in (self.value, self.default) if part is not None]


def is_independent(block: "Block") -> bool:
    """Whether the block occupies its own row in the block table."""
    return block.kind in (NodeKind.REPORTER, NodeKind.SHADOW)


def is_shadow_expression(block: "Block") -> bool:
    """Whether the block may serve as the default shadow of a socket."""
    if block.kind in (NodeKind.LITERAL, NodeKind.SHADOW, NodeKind.PLACEHOLDER):
        return True
    return block.kind is NodeKind.REFERENCE and block.variant is VlbVariant.BROADCAST


def represent_alone(block: "Block") -> Any:
    """Render a socket value by itself: an id reference or an inline array."""
    if block.kind is NodeKind.LITERAL:
        return [block.literal_kind.type_code, block.value]
    if block.kind is NodeKind.REFERENCE:
        return [block.variant.type_code, block.value, block.id]
    return block.id


def represent_as_input(block: "Block") -> List[Any]:
    status = INPUT_SAME_BLOCK_SHADOW if is_shadow_expression(block) else INPUT_NO_SHADOW
    return [status, represent_alone(block)]


def make_socket(expression: Optional["Block"], default: Optional["Block"]) -> Socket:
    """Combine a supplied expression with a socket's default shadow.

    A concrete expression keeps the default visible underneath it. When both
    are literals they collapse into one literal that carries the expression's
    text and the default's type.
    """
    if default is not None and (expression is None or not is_shadow_expression(expression)):
        return Socket(value=expression, default=default)
    if (
        expression is not None
        and default is not None
        and expression.kind is NodeKind.LITERAL
        and default.kind is NodeKind.LITERAL
    ):
        return Socket(value=expression.retyped(default.literal_kind))
    return Socket(value=expression)


def represent_socket(socket: Socket) -> Optional[List[Any]]:
    """Serialize a socket, or return None when nothing should be emitted."""
    if socket.default is None:
        if socket.value is None:
            return None
        return represent_as_input(socket.value)
    if socket.value is None:
        return represent_as_input(socket.default)
    return [INPUT_DIFF_BLOCK_SHADOW, represent_alone(socket.value), represent_alone(socket.default)]


def represent_field(field: Any) -> List[Any]:
    """Serialize a field entry as ``[value, id-or-null]``."""
    if isinstance(field, Field):
        return [field.value, field.id]
    if getattr(field, "kind", None) is NodeKind.REFERENCE:
        return [field.value, field.id]
    return [field.field_value().value, field.field_value().id]
