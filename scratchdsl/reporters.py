"""Reporter and operator blocks.

Every function returns a fresh, unattached block. Arguments accept blocks or
plain Python values (see ``blocks.as_expression``); menu arguments also accept
menu option names and sprites.
"""

from typing import Any

from .blocks import (
    Block,
    angle,
    as_expression,
    color,
    command,
    integer,
    number,
    reporter,
    text,
    whole_number,
)
from .constants import MathOp, TimeUnit
from .inputs import Field
from .menus import (
    Property,
    distance_object,
    first_costume,
    menu_input,
    property_target,
    sensing_key,
    touch_object,
)

# Motion


def x_position() -> Block:
    return (
        reporter("motion_xposition")
        .with_set_handler(lambda x: command("motion_setx").with_expression("X", x, number("0")))
        .with_change_handler(lambda dx: command("motion_changexby").with_expression("DX", dx, number("10")))
    )


def y_position() -> Block:
    return (
        reporter("motion_yposition")
        .with_set_handler(lambda y: command("motion_sety").with_expression("Y", y, number("0")))
        .with_change_handler(lambda dy: command("motion_changeyby").with_expression("DY", dy, number("10")))
    )


def direction() -> Block:
    return (
        reporter("motion_direction")
        .with_set_handler(
            lambda value: command("motion_pointindirection").with_expression("DIRECTION", value, angle("90"))
        )
        .with_change_handler(
            lambda value: command("motion_turnright").with_expression("DEGREES", value, number("15"))
        )
    )


# Looks


def costume_number_name(number_or_name: str = "number") -> Block:
    return (
        reporter("looks_costumenumbername")
        .with_field("NUMBER_NAME", Field(number_or_name))
        .with_set_handler(
            lambda value: command("looks_switchcostumeto").with_expression("COSTUME", value, first_costume())
        )
    )


def costume_number() -> Block:
    return costume_number_name("number")


def costume_name() -> Block:
    return costume_number_name("name")


def backdrop_number_name(number_or_name: str = "number") -> Block:
    return reporter("looks_backdropnumbername").with_field("NUMBER_NAME", Field(number_or_name))


def size() -> Block:
    return (
        reporter("looks_size")
        .with_set_handler(lambda value: command("looks_setsizeto").with_expression("SIZE", value, number("100")))
        .with_change_handler(
            lambda value: command("looks_changesizeby").with_expression("CHANGE", value, number("10"))
        )
    )


# Sound


def volume() -> Block:
    return (
        reporter("sound_volume")
        .with_set_handler(
            lambda value: command("sound_setvolumeto").with_expression("VOLUME", value, number("100"))
        )
        .with_change_handler(
            lambda value: command("sound_changevolumeby").with_expression("VOLUME", value, number("-10"))
        )
    )


# Sensing


def touching(target: Any = "_mouse_") -> Block:
    return reporter("sensing_touchingobject").with_expression(
        "TOUCHINGOBJECTMENU", menu_input(target, touch_object), touch_object("_mouse_")
    )


def touching_color(value: Any = None) -> Block:
    return reporter("sensing_touchingcolor").with_expression("COLOR", as_expression(value), color("#6deaa0"))


def color_touching_color(value: Any = None, other: Any = None) -> Block:
    return (
        reporter("sensing_coloristouchingcolor")
        .with_expression("COLOR", as_expression(value), color("#ba2a32"))
        .with_expression("COLOR2", as_expression(other), color("#c385eb"))
    )


def distance_to(target: Any = "_mouse_") -> Block:
    return reporter("sensing_distanceto").with_expression(
        "DISTANCETOMENU", menu_input(target, distance_object), distance_object("_mouse_")
    )


def answer() -> Block:
    return reporter("sensing_answer")


def key_pressed(key: Any = "space") -> Block:
    key_menu = sensing_key(key) if not isinstance(key, Block) else key
    return reporter("sensing_keypressed").with_expression("KEY_OPTION", key_menu, sensing_key("space"))


def mouse_down() -> Block:
    return reporter("sensing_mousedown")


def mouse_x() -> Block:
    return reporter("sensing_mousex")


def mouse_y() -> Block:
    return reporter("sensing_mousey")


def loudness() -> Block:
    return reporter("sensing_loudness")


def timer() -> Block:
    return reporter("sensing_timer")


def property_of(target: Any, prop: Any) -> Block:
    """``[prop] of (target)``; ``prop`` is a Property, a name or a variable."""
    if not isinstance(prop, Property):
        prop = Property.of(prop)
    return (
        reporter("sensing_of")
        .with_expression("OBJECT", menu_input(target, property_target), property_target("_stage_"))
        .with_field("PROPERTY", prop)
    )


def current(unit: TimeUnit) -> Block:
    return reporter("sensing_current").with_field("CURRENTMENU", Field(unit.value))


def days_since_2000() -> Block:
    return reporter("sensing_dayssince2000")


def username() -> Block:
    return reporter("sensing_username")


# Operators


def _binary(opcode: str, a: Any, b: Any, names=("NUM1", "NUM2"), defaults=(None, None)) -> Block:
    block = reporter(opcode)
    block.with_expression(names[0], as_expression(a), defaults[0])
    block.with_expression(names[1], as_expression(b), defaults[1])
    return block


def add(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_add", a, b, defaults=(number(""), number("")))


def subtract(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_subtract", a, b, defaults=(number(""), number("")))


def multiply(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_multiply", a, b, defaults=(number(""), number("")))


def divide(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_divide", a, b, defaults=(number(""), number("")))


def mod(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_mod", a, b, defaults=(number(""), number("")))


def pick_random(low: Any = None, high: Any = None) -> Block:
    return _binary("operator_random", low, high, ("FROM", "TO"), (number("1"), number("10")))


def greater_than(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_gt", a, b, ("OPERAND1", "OPERAND2"), (text(""), text("50")))


def less_than(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_lt", a, b, ("OPERAND1", "OPERAND2"), (text(""), text("50")))


def equals(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_equals", a, b, ("OPERAND1", "OPERAND2"), (text(""), text("50")))


def and_(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_and", a, b, ("OPERAND1", "OPERAND2"))


def or_(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_or", a, b, ("OPERAND1", "OPERAND2"))


def not_(operand: Any = None) -> Block:
    return reporter("operator_not").with_expression("OPERAND", as_expression(operand))


def join(a: Any = None, b: Any = None) -> Block:
    return _binary("operator_join", a, b, ("STRING1", "STRING2"), (text("apple "), text("banana")))


def letter_of(letter: Any = None, string: Any = None) -> Block:
    return _binary("operator_letter_of", letter, string, ("LETTER", "STRING"), (whole_number("1"), text("apple")))


def length_of(string: Any = None) -> Block:
    return reporter("operator_length").with_expression("STRING", as_expression(string), text("apple"))


def contains(string: Any = None, part: Any = None) -> Block:
    return _binary("operator_contains", string, part, ("STRING1", "STRING2"), (text("apple"), text("a")))


def round_(value: Any = None) -> Block:
    return reporter("operator_round").with_expression("NUM", as_expression(value), number(""))


def math_op(op: MathOp, value: Any = None) -> Block:
    return (
        reporter("operator_mathop")
        .with_expression("NUM", as_expression(value), number(""))
        .with_field("OPERATOR", Field(op.value))
    )


# Data


def item_of(items: Block, index: Any = None) -> Block:
    index_expression = as_expression(index)
    return (
        reporter("data_itemoflist")
        .with_expression("INDEX", index_expression, integer("1"))
        .with_field("LIST", items)
        .with_set_handler(
            lambda value: command("data_replaceitemoflist")
            .with_expression("INDEX", index_expression.clone() if index_expression else None, integer("1"))
            .with_expression("ITEM", value, text("thing"))
            .with_field("LIST", items)
        )
    )


def item_number_of(items: Block, item: Any = None) -> Block:
    return (
        reporter("data_itemnumoflist")
        .with_expression("ITEM", as_expression(item), text("thing"))
        .with_field("LIST", items)
    )


def length_of_list(items: Block) -> Block:
    return reporter("data_lengthoflist").with_field("LIST", items)


def list_contains(items: Block, item: Any = None) -> Block:
    return (
        reporter("data_listcontainsitem")
        .with_expression("ITEM", as_expression(item), text("thing"))
        .with_field("LIST", items)
    )
