"""Stack builder: appends command and control blocks to a script.

Builder callbacks receive a ``StackBuilder``; nested bodies (repeat, if, ...)
are themselves callbacks and run immediately, in call order.
"""

from typing import Any, Callable, Optional, Union

from .blocks import (
    Block,
    BlockStack,
    angle,
    as_expression,
    command,
    container,
    create_block_stack,
    integer,
    number,
    positive_number,
    text,
    whole_number,
)
from .constants import (
    DragMode,
    LayerDirection,
    LooksEffect,
    RotationStyle,
    SoundEffect,
    SpecialLayer,
    StopType,
)
from .errors import NotSettableError, UsageError
from .inputs import Field
from .menus import (
    backdrop_menu,
    clone_target,
    costume_menu,
    first_backdrop,
    first_broadcast,
    first_costume,
    first_sound,
    menu_input,
    named_broadcast,
    random_position,
    sound_menu,
    special_direction,
    special_location,
)
from .procedures import Procedure, ProcedureBuilder
from .reporters import add

Body = Callable[["StackBuilder"], Any]


def _location(value: Any, opcode: str) -> Optional[Block]:
    if isinstance(value, str) or hasattr(value, "is_stage"):
        return special_location(value, opcode)
    return as_expression(value)


def _message(value: Any) -> Optional[Block]:
    if isinstance(value, str):
        return named_broadcast(value)
    return as_expression(value)


def _condition(value: Any) -> Optional[Block]:
    # boolean sockets hold no literal, only a reporter
    if value is None or isinstance(value, Block):
        return value
    raise UsageError("Condition must be a boolean reporter", f"got {type(value).__name__}")


class StackBuilder:
    """Appends blocks to one ``BlockStack``."""

    def __init__(self, stack: BlockStack) -> None:
        self.stack = stack

    def add_block(self, block: Block) -> Block:
        return self.stack.add_block(block)

    def stack_of(self, body: Optional[Union[Body, BlockStack]]) -> BlockStack:
        if isinstance(body, BlockStack):
            return body
        if body is None:
            return BlockStack()
        return create_block_stack(body)

    def blocks(self, stack: Union[Body, BlockStack]) -> BlockStack:
        """Append a freshly built stack, or a copy of an existing one."""
        if isinstance(stack, BlockStack):
            stack = stack.clone()
        else:
            stack = self.stack_of(stack)
        moved, stack.contents = stack.contents, []
        for block in moved:
            block.attached = False
            self.add_block(block)
        return self.stack

    # -- settable expressions ----------------------------------------------

    def set(self, expression: Block, value: Any) -> Block:
        if expression.set_handler is None:
            raise NotSettableError("Expression cannot be set", f"opcode {expression.opcode}")
        return self.add_block(expression.set_handler(as_expression(value)))

    def change_by(self, expression: Block, value: Any) -> Block:
        if expression.change_handler is not None:
            return self.add_block(expression.change_handler(as_expression(value)))
        if expression.set_handler is not None:
            return self.add_block(expression.set_handler(add(expression, value)))
        raise NotSettableError("Expression cannot be changed", f"opcode {expression.opcode}")

    # -- motion ---------------------------------------------------------------

    def move_steps(self, steps: Any = None) -> Block:
        return self.add_block(command("motion_movesteps").with_expression("STEPS", as_expression(steps), number("10")))

    def turn_right(self, degrees: Any = None) -> Block:
        return self.add_block(command("motion_turnright").with_expression("DEGREES", as_expression(degrees), number("15")))

    def turn_left(self, degrees: Any = None) -> Block:
        return self.add_block(command("motion_turnleft").with_expression("DEGREES", as_expression(degrees), number("15")))

    def go_to(self, location: Any = None) -> Block:
        return self.add_block(
            command("motion_goto").with_expression(
                "TO", _location(location, "motion_goto_menu"), random_position("motion_goto_menu")
            )
        )

    def go_to_xy(self, x: Any = None, y: Any = None) -> Block:
        return self.add_block(
            command("motion_gotoxy")
            .with_expression("X", as_expression(x), number("0"))
            .with_expression("Y", as_expression(y), number("0"))
        )

    def glide_to(self, location: Any = None, secs: Any = None) -> Block:
        return self.add_block(
            command("motion_glideto")
            .with_expression("SECS", as_expression(secs), number("1"))
            .with_expression("TO", _location(location, "motion_glideto_menu"), random_position("motion_glideto_menu"))
        )

    def glide_to_xy(self, x: Any = None, y: Any = None, secs: Any = None) -> Block:
        return self.add_block(
            command("motion_glidesecstoxy")
            .with_expression("SECS", as_expression(secs), number("1"))
            .with_expression("X", as_expression(x), number("0"))
            .with_expression("Y", as_expression(y), number("0"))
        )

    def point_in_direction(self, value: Any = None) -> Block:
        return self.add_block(
            command("motion_pointindirection").with_expression("DIRECTION", as_expression(value), angle("90"))
        )

    def point_towards(self, towards: Any = None) -> Block:
        return self.add_block(
            command("motion_pointtowards").with_expression(
                "TOWARDS", menu_input(towards, special_direction), special_direction("_mouse_")
            )
        )

    def change_x_by(self, dx: Any = None) -> Block:
        return self.add_block(command("motion_changexby").with_expression("DX", as_expression(dx), number("10")))

    def set_x(self, x: Any = None) -> Block:
        return self.add_block(command("motion_setx").with_expression("X", as_expression(x), number("0")))

    def change_y_by(self, dy: Any = None) -> Block:
        return self.add_block(command("motion_changeyby").with_expression("DY", as_expression(dy), number("10")))

    def set_y(self, y: Any = None) -> Block:
        return self.add_block(command("motion_sety").with_expression("Y", as_expression(y), number("0")))

    def if_on_edge_bounce(self) -> Block:
        return self.add_block(command("motion_ifonedgebounce"))

    def set_rotation_style(self, style: RotationStyle) -> Block:
        return self.add_block(command("motion_setrotationstyle").with_field("STYLE", Field(style.value)))

    # -- looks ----------------------------------------------------------------

    def say_for_secs(self, message: Any = None, secs: Any = None) -> Block:
        return self.add_block(
            command("looks_sayforsecs")
            .with_expression("MESSAGE", as_expression(message), text("Hello!"))
            .with_expression("SECS", as_expression(secs), number("2"))
        )

    def say(self, message: Any = None) -> Block:
        return self.add_block(command("looks_say").with_expression("MESSAGE", as_expression(message), text("Hello!")))

    def think_for_secs(self, message: Any = None, secs: Any = None) -> Block:
        return self.add_block(
            command("looks_thinkforsecs")
            .with_expression("MESSAGE", as_expression(message), text("Hmm..."))
            .with_expression("SECS", as_expression(secs), number("2"))
        )

    def think(self, message: Any = None) -> Block:
        return self.add_block(command("looks_think").with_expression("MESSAGE", as_expression(message), text("Hmm...")))

    def switch_costume_to(self, costume: Any = None) -> Block:
        return self.add_block(
            command("looks_switchcostumeto").with_expression("COSTUME", menu_input(costume, costume_menu), first_costume())
        )

    def next_costume(self) -> Block:
        return self.add_block(command("looks_nextcostume"))

    def switch_backdrop_to(self, backdrop: Any = None) -> Block:
        return self.add_block(
            command("looks_switchbackdropto").with_expression(
                "BACKDROP", menu_input(backdrop, backdrop_menu), first_backdrop()
            )
        )

    def next_backdrop(self) -> Block:
        return self.add_block(command("looks_nextbackdrop"))

    def change_size_by(self, change: Any = None) -> Block:
        return self.add_block(command("looks_changesizeby").with_expression("CHANGE", as_expression(change), number("10")))

    def set_size_to(self, value: Any = None) -> Block:
        return self.add_block(command("looks_setsizeto").with_expression("SIZE", as_expression(value), number("100")))

    def change_effect_by(self, effect: LooksEffect, change: Any = None) -> Block:
        return self.add_block(
            command("looks_changeeffectby")
            .with_expression("CHANGE", as_expression(change), number("25"))
            .with_field("EFFECT", Field(effect.value))
        )

    def set_effect_to(self, effect: LooksEffect, value: Any = None) -> Block:
        return self.add_block(
            command("looks_seteffectto")
            .with_expression("VALUE", as_expression(value), number("0"))
            .with_field("EFFECT", Field(effect.value))
        )

    def clear_graphic_effects(self) -> Block:
        return self.add_block(command("looks_cleargraphiceffects"))

    def show(self) -> Block:
        return self.add_block(command("looks_show"))

    def hide(self) -> Block:
        return self.add_block(command("looks_hide"))

    def go_to_layer(self, layer: SpecialLayer) -> Block:
        return self.add_block(command("looks_gotofrontback").with_field("FRONT_BACK", Field(layer.value)))

    def change_layer(self, layer_direction: LayerDirection, layers: Any = None) -> Block:
        return self.add_block(
            command("looks_goforwardbackwardlayers")
            .with_expression("NUM", as_expression(layers), integer("1"))
            .with_field("FORWARD_BACKWARD", Field(layer_direction.value))
        )

    # -- sound ----------------------------------------------------------------

    def play_sound_until_done(self, sound: Any = None) -> Block:
        return self.add_block(
            command("sound_playuntildone").with_expression("SOUND_MENU", menu_input(sound, sound_menu), first_sound())
        )

    def play_sound(self, sound: Any = None) -> Block:
        return self.add_block(command("sound_play").with_expression("SOUND_MENU", menu_input(sound, sound_menu), first_sound()))

    def stop_all_sounds(self) -> Block:
        return self.add_block(command("sound_stopallsounds"))

    def change_sound_effect_by(self, effect: SoundEffect, value: Any = None) -> Block:
        return self.add_block(
            command("sound_changeeffectby")
            .with_expression("VALUE", as_expression(value), number("10"))
            .with_field("EFFECT", Field(effect.value))
        )

    def set_sound_effect_to(self, effect: SoundEffect, value: Any = None) -> Block:
        return self.add_block(
            command("sound_seteffectto")
            .with_expression("VALUE", as_expression(value), number("100"))
            .with_field("EFFECT", Field(effect.value))
        )

    def clear_sound_effects(self) -> Block:
        return self.add_block(command("sound_cleareffects"))

    def change_volume_by(self, value: Any = None) -> Block:
        return self.add_block(command("sound_changevolumeby").with_expression("VOLUME", as_expression(value), number("-10")))

    def set_volume_to(self, value: Any = None) -> Block:
        return self.add_block(command("sound_setvolumeto").with_expression("VOLUME", as_expression(value), number("100")))

    # -- events ---------------------------------------------------------------

    def broadcast(self, message: Any = None) -> Block:
        return self.add_block(
            command("event_broadcast").with_expression("BROADCAST_INPUT", _message(message), first_broadcast())
        )

    def broadcast_and_wait(self, message: Any = None) -> Block:
        return self.add_block(
            command("event_broadcastandwait").with_expression("BROADCAST_INPUT", _message(message), first_broadcast())
        )

    # -- control --------------------------------------------------------------

    def wait(self, duration: Any = None) -> Block:
        return self.add_block(
            command("control_wait").with_expression("DURATION", as_expression(duration), positive_number("1"))
        )

    def repeat(self, times: Any = None, body: Optional[Body] = None) -> Block:
        return self.add_block(
            container("control_repeat", SUBSTACK=self.stack_of(body))
            .with_expression("TIMES", as_expression(times), whole_number("10"))
        )

    def forever(self, body: Optional[Body] = None) -> Block:
        return self.add_block(container("control_forever", SUBSTACK=self.stack_of(body)))

    def if_(self, condition: Optional[Block] = None, body: Optional[Body] = None) -> Block:
        return self.add_block(
            container("control_if", SUBSTACK=self.stack_of(body)).with_expression("CONDITION", _condition(condition))
        )

    def if_else(
        self,
        condition: Optional[Block] = None,
        body: Optional[Body] = None,
        else_body: Optional[Body] = None,
    ) -> Block:
        block = container("control_if_else", SUBSTACK=self.stack_of(body), SUBSTACK2=self.stack_of(else_body))
        return self.add_block(block.with_expression("CONDITION", _condition(condition)))

    def wait_until(self, condition: Optional[Block] = None) -> Block:
        return self.add_block(command("control_wait_until").with_expression("CONDITION", _condition(condition)))

    def repeat_until(self, condition: Optional[Block] = None, body: Optional[Body] = None) -> Block:
        return self.add_block(
            container("control_repeat_until", SUBSTACK=self.stack_of(body)).with_expression("CONDITION", _condition(condition))
        )

    def while_(self, condition: Optional[Block] = None, body: Optional[Body] = None) -> Block:
        return self.add_block(
            container("control_while", SUBSTACK=self.stack_of(body)).with_expression("CONDITION", _condition(condition))
        )

    def stop(self, stop_type: StopType = StopType.THIS_SCRIPT) -> Block:
        return self.add_block(
            command("control_stop")
            .with_field("STOP_OPTION", Field(stop_type.value))
            .with_default_mutation()
            .with_mutation("hasnext", stop_type is StopType.OTHER_SCRIPTS_IN_SPRITE)
        )

    def create_clone_of(self, target: Any = "_myself_") -> Block:
        return self.add_block(
            command("control_create_clone_of").with_expression(
                "CLONE_OPTION", menu_input(target, clone_target), clone_target("_myself_")
            )
        )

    def delete_this_clone(self) -> Block:
        return self.add_block(command("control_delete_this_clone"))

    # -- sensing --------------------------------------------------------------

    def ask_and_wait(self, question: Any = None) -> Block:
        return self.add_block(
            command("sensing_askandwait").with_expression("QUESTION", as_expression(question), text("What's your name?"))
        )

    def set_drag_mode(self, mode: DragMode) -> Block:
        return self.add_block(command("sensing_setdragmode").with_field("DRAG_MODE", Field(mode.value)))

    def reset_timer(self) -> Block:
        return self.add_block(command("sensing_resettimer"))

    # -- data -----------------------------------------------------------------

    def set_variable(self, declared: Block, value: Any = None) -> Block:
        return self.add_block(
            command("data_setvariableto")
            .with_expression("VALUE", as_expression(value), text("0"))
            .with_field("VARIABLE", declared)
        )

    def change_variable_by(self, declared: Block, value: Any = None) -> Block:
        return self.add_block(
            command("data_changevariableby")
            .with_expression("VALUE", as_expression(value), number("1"))
            .with_field("VARIABLE", declared)
        )

    def show_variable(self, declared: Block) -> Block:
        return self.add_block(command("data_showvariable").with_field("VARIABLE", declared))

    def hide_variable(self, declared: Block) -> Block:
        return self.add_block(command("data_hidevariable").with_field("VARIABLE", declared))

    def append(self, items: Block, value: Any = None) -> Block:
        return self.add_block(
            command("data_addtolist")
            .with_expression("ITEM", as_expression(value), text("thing"))
            .with_field("LIST", items)
        )

    def delete_at(self, items: Block, index: Any = None) -> Block:
        return self.add_block(
            command("data_deleteoflist")
            .with_expression("INDEX", as_expression(index), integer("1"))
            .with_field("LIST", items)
        )

    def delete_all(self, items: Block) -> Block:
        return self.add_block(command("data_deletealloflist").with_field("LIST", items))

    def insert_at(self, items: Block, value: Any = None, index: Any = None) -> Block:
        return self.add_block(
            command("data_insertatlist")
            .with_expression("INDEX", as_expression(index), integer("1"))
            .with_expression("ITEM", as_expression(value), text("thing"))
            .with_field("LIST", items)
        )

    def replace_at(self, items: Block, value: Any = None, index: Any = None) -> Block:
        return self.add_block(
            command("data_replaceitemoflist")
            .with_expression("INDEX", as_expression(index), integer("1"))
            .with_expression("ITEM", as_expression(value), text("thing"))
            .with_field("LIST", items)
        )

    def show_list(self, items: Block) -> Block:
        return self.add_block(command("data_showlist").with_field("LIST", items))

    def hide_list(self, items: Block) -> Block:
        return self.add_block(command("data_hidelist").with_field("LIST", items))

    # -- procedures -----------------------------------------------------------

    def call(self, procedure: Union[Procedure, ProcedureBuilder], *values: Any) -> Block:
        if isinstance(procedure, ProcedureBuilder):
            procedure = procedure.procedure
        return self.add_block(procedure.call_block(*values))
