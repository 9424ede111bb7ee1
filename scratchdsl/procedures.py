"""Custom blocks ("My Blocks").

A ``ProcedureBuilder`` collects the labels and arguments of a custom block,
then ``implement`` adds the ``procedures_definition`` hat to its target and
runs the body callback immediately. The definition carries a
``procedures_prototype`` shadow whose inputs hold one argument shadow per
argument, keyed by argument id.
"""

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, List, Optional

from .blocks import Block, as_expression, command, hat, reporter, shadow_reporter, text
from .errors import UsageError
from .ids import make_id
from .inputs import Field

if TYPE_CHECKING:
    from .script import StackBuilder
    from .targets import Target

STRING_NUMBER = "argument_reporter_string_number"
BOOLEAN = "argument_reporter_boolean"


def _compact(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


@dataclass
class Argument:
    """One declared argument. Use it as an expression inside the body."""
    name: str
    default: str
    opcode: str = STRING_NUMBER
    _id: Optional[str] = field(default=None, repr=False)

    @property
    def argument_id(self) -> str:
        if self._id is None:
            self._id = make_id()
        return self._id

    @property
    def is_boolean(self) -> bool:
        return self.opcode == BOOLEAN

    def shadow(self) -> Block:
        return shadow_reporter(self.opcode).with_field("VALUE", Field(self.name))

    def as_block(self) -> Block:
        return reporter(self.opcode).with_field("VALUE", Field(self.name))


class Procedure:
    """An implemented custom block that can be called."""

    def __init__(self, proccode: str, warp: bool, arguments: List[Argument]) -> None:
        self.proccode = proccode
        self.warp = warp
        self.arguments = arguments
        self.definition: Optional[Block] = None

    def prototype(self) -> Block:
        block = shadow_reporter("procedures_prototype").with_default_mutation()
        block.with_mutation("proccode", self.proccode)
        block.with_mutation("argumentids", _compact([a.argument_id for a in self.arguments]))
        block.with_mutation("argumentnames", _compact([a.name for a in self.arguments]))
        block.with_mutation("argumentdefaults", _compact([a.default for a in self.arguments]))
        block.with_mutation("warp", _compact(self.warp))
        for argument in self.arguments:
            block.with_expression(argument.argument_id, argument.shadow())
        return block

    def call_block(self, *values: Any) -> Block:
        if len(values) > len(self.arguments):
            raise UsageError(
                f"Custom block takes {len(self.arguments)} arguments, got {len(values)}", self.proccode
            )
        block = command("procedures_call").with_default_mutation()
        block.with_mutation("argumentids", _compact([a.argument_id for a in self.arguments]))
        block.with_mutation("proccode", self.proccode)
        block.with_mutation("warp", _compact(self.warp))
        padded = list(values) + [None] * (len(self.arguments) - len(values))
        for argument, value in zip(self.arguments, padded):
            if argument.is_boolean:
                block.with_expression(argument.argument_id, as_expression(value))
            else:
                block.with_expression(argument.argument_id, as_expression(value), text(""))
        return block


class ProcedureBuilder:
    """Collects the signature of a custom block for one target."""

    def __init__(self, target: "Target", name: str, warp: bool = False) -> None:
        self.target = target
        self.proccode = name
        self.warp = warp
        self.arguments: List[Argument] = []
        self._procedure: Optional[Procedure] = None

    def _add(self, argument: Argument, marker: str) -> Argument:
        self.proccode += f" {marker}"
        self.arguments.append(argument)
        return argument

    def string_number(self, name: str, default: str = "") -> Argument:
        return self._add(Argument(name, default), "%s")

    def number(self, name: str, default: str = "1") -> Argument:
        return self._add(Argument(name, default), "%n")

    def boolean(self, name: str, default: str = "false") -> Argument:
        return self._add(Argument(name, default, BOOLEAN), "%b")

    def text(self, label: str) -> None:
        self.proccode += f" {label}"

    def set_proccode(self, proccode: str) -> None:
        self.proccode = proccode

    def implement(self, body: Callable[["StackBuilder"], Any]) -> Procedure:
        """Add the definition script and build its body right away."""
        from .script import StackBuilder

        procedure = Procedure(self.proccode, self.warp, list(self.arguments))
        self._procedure = procedure
        definition = hat("procedures_definition").with_expression("custom_block", None, procedure.prototype())
        procedure.definition = definition
        self.target.add_script(definition)
        body(StackBuilder(definition.script))
        return procedure

    @property
    def procedure(self) -> Procedure:
        """The implemented procedure; an empty definition is added if needed."""
        if self._procedure is None:
            return self.implement(lambda _: None)
        return self._procedure
