"""Tests for scratchdsl.script and scratchdsl.reporters: the block catalogue."""

import pytest

from scratchdsl.blocks import BlockStack
from scratchdsl.constants import MathOp, StopType
from scratchdsl.errors import NotSettableError, UsageError
from scratchdsl.reporters import (
    add,
    answer,
    costume_number,
    greater_than,
    item_of,
    join,
    math_op,
    pick_random,
    property_of,
    touching,
    x_position,
)
from scratchdsl.script import StackBuilder
from scratchdsl.vlb import scratch_list, variable


@pytest.fixture
def builder():
    return StackBuilder(BlockStack())


def _opcodes(builder):
    return [block.opcode for block in builder.stack.contents]


class TestSettable:
    def test_set_variable(self, builder):
        score = variable("score")
        block = builder.set(score, 3)
        assert block.opcode == "data_setvariableto"
        assert block.represent()["inputs"] == {"VALUE": [1, [10, "3"]]}
        assert block.fields["VARIABLE"] is score

    def test_change_variable(self, builder):
        block = builder.change_by(variable("score"), 2)
        assert block.opcode == "data_changevariableby"
        assert block.represent()["inputs"] == {"VALUE": [1, [4, "2"]]}

    def test_set_x_position(self, builder):
        assert builder.set(x_position(), 10).opcode == "motion_setx"
        assert builder.change_by(x_position(), 10).opcode == "motion_changexby"

    def test_change_falls_back_to_set_with_add(self, builder):
        block = builder.change_by(costume_number(), 1)
        assert block.opcode == "looks_switchcostumeto"
        operand = block.inputs["COSTUME"].value
        assert operand.opcode == "operator_add"
        assert operand.inputs["NUM1"].value.opcode == "looks_costumenumbername"

    def test_item_of_sets_replace(self, builder):
        items = scratch_list("items")
        block = builder.set(item_of(items, 2), "x")
        assert block.opcode == "data_replaceitemoflist"
        entry = block.represent()
        assert entry["inputs"]["INDEX"] == [1, [7, "2"]]
        assert entry["inputs"]["ITEM"] == [1, [10, "x"]]

    def test_not_settable(self, builder):
        with pytest.raises(NotSettableError):
            builder.set(answer(), 1)
        with pytest.raises(NotSettableError):
            builder.change_by(answer(), 1)


class TestControl:
    def test_nested_bodies_run_in_order(self, builder):
        loop = builder.repeat(3, lambda r: (r.show(), r.hide()))
        assert _opcodes(builder) == ["control_repeat"]
        assert [b.opcode for b in loop.stacks["SUBSTACK"].contents] == ["looks_show", "looks_hide"]

    def test_if_else_has_two_branches(self, builder):
        block = builder.if_else(greater_than(1, 2), lambda s: s.show(), lambda s: s.hide())
        assert block.stacks["SUBSTACK"].contents[0].opcode == "looks_show"
        assert block.stacks["SUBSTACK2"].contents[0].opcode == "looks_hide"

    def test_condition_without_default(self, builder):
        block = builder.wait_until()
        assert block.represent()["inputs"] == {}

    def test_stop_mutation(self, builder):
        entry = builder.stop(StopType.OTHER_SCRIPTS_IN_SPRITE).represent()
        assert entry["fields"] == {"STOP_OPTION": ["other scripts in sprite", None]}
        assert entry["mutation"] == {"tagName": "mutation", "children": [], "hasnext": True}
        assert builder.stop(StopType.ALL).represent()["mutation"]["hasnext"] is False

    def test_wait_default(self, builder):
        assert builder.wait().represent()["inputs"] == {"DURATION": [1, [5, "1"]]}

    def test_create_clone_default(self, builder):
        block = builder.create_clone_of()
        menu = block.inputs["CLONE_OPTION"].value
        assert menu.represent()["fields"] == {"CLONE_OPTION": ["_myself_", None]}
        assert block.inputs["CLONE_OPTION"].default is None

    def test_existing_stack_is_appended_as_copy(self, builder):
        other = StackBuilder(BlockStack())
        show = other.show()
        other.hide()
        builder.blocks(other.stack)
        assert _opcodes(builder) == ["looks_show", "looks_hide"]
        assert other.stack.contents[0] is show
        assert builder.stack.contents[0] is not show

    def test_built_stack_is_moved(self, builder):
        builder.blocks(lambda s: (s.show(), s.hide()))
        assert _opcodes(builder) == ["looks_show", "looks_hide"]

    def test_condition_must_be_a_reporter(self, builder):
        with pytest.raises(UsageError):
            builder.if_(True, lambda s: s.show())
        with pytest.raises(UsageError):
            builder.wait_until("yes")
        assert _opcodes(builder) == []


class TestMotion:
    def test_go_to_named_sprite(self, builder, sprite):
        block = builder.go_to(sprite)
        menu = block.inputs["TO"].value
        assert menu.opcode == "motion_goto_menu"
        assert menu.represent()["fields"] == {"TO": ["Cat", None]}

    def test_glide_default_menu(self, builder):
        block = builder.glide_to()
        assert block.inputs["TO"].default.opcode == "motion_glideto_menu"
        assert block.inputs["SECS"].default.value == "1"

    def test_point_in_direction_angle(self, builder):
        entry = builder.point_in_direction(45).represent()
        assert entry["inputs"] == {"DIRECTION": [1, [8, "45"]]}


class TestReporters:
    def test_operator_defaults(self):
        assert add().represent()["inputs"] == {"NUM1": [1, [4, ""]], "NUM2": [1, [4, ""]]}
        entry = pick_random(1, 6).represent()
        assert entry["inputs"] == {"FROM": [1, [4, "1"]], "TO": [1, [4, "6"]]}

    def test_join_nested_reporter(self):
        inner = answer()
        entry = join("Hello ", inner).represent()
        assert entry["inputs"]["STRING1"] == [1, [10, "Hello "]]
        assert entry["inputs"]["STRING2"] == [3, inner.id, [10, "banana"]]

    def test_math_op_field(self):
        entry = math_op(MathOp.SQRT, 9).represent()
        assert entry["fields"] == {"OPERATOR": ["sqrt", None]}

    def test_touching_edge(self):
        menu = touching("edge").inputs["TOUCHINGOBJECTMENU"].value
        assert menu.represent()["fields"] == {"TOUCHINGOBJECTMENU": ["_edge_", None]}

    def test_property_of_variable(self, project):
        dog = project.sprite("Dog")
        speed = dog.make_var("speed")
        entry = property_of(dog, speed).represent()
        assert entry["fields"] == {"PROPERTY": ["speed", None]}
        assert entry["opcode"] == "sensing_of"


class TestMenusByName:
    def test_costume_name_uses_menu(self, builder):
        block = builder.switch_costume_to("walk")
        menu = block.inputs["COSTUME"].value
        assert menu.opcode == "looks_costume"
        assert menu.represent()["fields"] == {"COSTUME": ["walk", None]}
        assert block.represent()["inputs"] == {"COSTUME": [1, menu.id]}

    def test_sound_name_uses_menu(self, builder):
        for block in (builder.play_sound("meow"), builder.play_sound_until_done("meow")):
            menu = block.inputs["SOUND_MENU"].value
            assert menu.opcode == "sound_sounds_menu"
            assert menu.represent()["fields"] == {"SOUND_MENU": ["meow", None]}

    def test_backdrop_name_uses_menu(self, builder):
        menu = builder.switch_backdrop_to("night").inputs["BACKDROP"].value
        assert menu.represent()["fields"] == {"BACKDROP": ["night", None]}
