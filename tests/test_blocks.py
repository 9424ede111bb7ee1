"""Tests for scratchdsl.blocks: ids, flatten, stacks, cloning and entry layout."""

import pytest

from scratchdsl.blocks import (
    BlockStack,
    IsolatedStack,
    command,
    container,
    create_block_stack,
    hat,
    number,
    placeholder,
    reporter,
    text,
)
from scratchdsl.errors import BlockAlreadyAttachedError, EmptyStackError, UnresolvedPlaceholderError, UsageError
from scratchdsl.inputs import NodeKind
from scratchdsl.vlb import variable


class TestIds:
    def test_id_is_lazy_and_stable(self, id_generator):
        block = command("motion_movesteps")
        assert id_generator.counter == 0
        first = block.id
        assert block.id == first
        assert id_generator.counter == 1

    def test_id_can_be_overridden(self):
        block = command("motion_movesteps")
        block.id = "custom"
        assert block.id == "custom"

    def test_id_is_fixed_once_read(self):
        block = command("motion_movesteps")
        first = block.id
        with pytest.raises(UsageError):
            block.id = "custom"
        assert block.id == first

    def test_stack_id_is_first_block(self):
        first = command("looks_show")
        stack = BlockStack([first, command("looks_hide")])
        assert stack.id == first.id
        assert BlockStack().id is None


class TestFlatten:
    def test_next_chain_follows_order(self):
        blocks = [command("looks_show"), command("looks_hide"), command("looks_nextcostume")]
        stack = BlockStack(blocks)
        table = {}
        stack.flatten_into(table)
        assert blocks[0].next is blocks[1]
        assert blocks[1].next is blocks[2]
        assert blocks[2].next is None
        assert all(block.parent is None for block in blocks)
        assert len(table) == 3

    def test_nested_stack_parents(self):
        inner = command("motion_movesteps")
        loop = container("control_forever", SUBSTACK=BlockStack([inner]))
        table = {}
        BlockStack([loop]).flatten_into(table)
        assert inner.parent == loop.id
        assert set(table) == {loop.id, inner.id}

    def test_independent_inputs_are_flattened(self):
        value = reporter("motion_xposition")
        move = command("motion_movesteps").with_expression("STEPS", value, number("10"))
        table = {}
        BlockStack([move]).flatten_into(table)
        assert table[value.id] is value
        assert value.parent == move.id
        assert len(table) == 2

    def test_literals_and_declarations_stay_inline(self):
        block = (
            command("data_setvariableto")
            .with_expression("VALUE", text("5"), text("0"))
            .with_field("VARIABLE", variable("x"))
        )
        table = {}
        BlockStack([block]).flatten_into(table)
        assert list(table) == [block.id]

    def test_block_used_twice_is_rejected(self):
        shared = reporter("motion_xposition")
        first = command("motion_movesteps").with_expression("STEPS", shared, number("10"))
        second = command("motion_turnright").with_expression("DEGREES", shared, number("15"))
        with pytest.raises(BlockAlreadyAttachedError):
            BlockStack([first, second]).flatten_into({})

    def test_placeholder_must_be_resolved(self):
        unresolved = placeholder("looks_costume", lambda target: None)
        with pytest.raises(UnresolvedPlaceholderError):
            unresolved.flatten_into({})


class TestAttach:
    def test_adding_twice_raises(self):
        block = command("looks_show")
        stack = BlockStack([block])
        with pytest.raises(BlockAlreadyAttachedError):
            stack.add_block(block)

    def test_adding_to_second_stack_raises(self):
        block = command("looks_show")
        BlockStack([block])
        with pytest.raises(BlockAlreadyAttachedError):
            BlockStack([block])


class TestRepresent:
    def test_entry_key_order(self):
        block = command("control_stop").with_field("STOP_OPTION", "all").with_default_mutation()
        entry = block.represent()
        assert list(entry) == ["inputs", "fields", "mutation", "topLevel", "next", "parent", "shadow", "opcode"]
        assert entry["fields"] == {"STOP_OPTION": ["all", None]}

    def test_top_level_has_position(self):
        start = hat("event_whenflagclicked")
        entry = start.represent()
        assert entry["topLevel"] is True
        assert entry["x"] == 0
        assert entry["y"] == 0
        assert list(entry)[-2:] == ["x", "y"]

    def test_empty_mutation_is_omitted(self):
        assert "mutation" not in command("looks_show").represent()

    def test_empty_substack_is_omitted(self):
        loop = container("control_forever", SUBSTACK=BlockStack())
        assert loop.represent()["inputs"] == {}

    def test_substack_input(self):
        inner = command("looks_show")
        loop = container("control_forever", SUBSTACK=BlockStack([inner]))
        assert loop.represent()["inputs"] == {"SUBSTACK": [2, inner.id]}

    def test_literal_is_shadow(self):
        assert number("1").shadow is True
        assert reporter("sensing_answer").shadow is False


class TestHat:
    def test_hat_owns_its_script(self):
        start = hat("event_whenflagclicked")
        assert start.script.contents == [start]
        assert start.top_level
        assert start.kind is NodeKind.HAT


class TestIsolatedStack:
    def test_empty_stack_raises(self):
        isolated = IsolatedStack(BlockStack())
        with pytest.raises(EmptyStackError):
            isolated.id
        with pytest.raises(EmptyStackError):
            isolated.opcode

    def test_passes_through_to_first_block(self):
        first = command("looks_show")
        isolated = IsolatedStack(BlockStack([first]))
        isolated.id = "top"
        assert first.id == "top"
        assert isolated.id == first.id
        assert isolated.opcode == "looks_show"


class TestClone:
    def test_clone_has_fresh_ids(self):
        original = command("motion_movesteps").with_expression("STEPS", reporter("motion_xposition"), number("10"))
        copy = original.clone()
        assert copy.id != original.id
        assert copy.inputs["STEPS"].value.id != original.inputs["STEPS"].value.id
        assert copy.inputs["STEPS"].default.value == "10"

    def test_clone_copies_mutation(self):
        original = command("control_stop").with_default_mutation().with_mutation("hasnext", True)
        copy = original.clone()
        assert copy.mutation == original.mutation
        copy.with_mutation("hasnext", False)
        assert original.mutation["hasnext"] is True

    def test_clone_shares_declarations(self):
        score = variable("score")
        original = command("data_showvariable").with_field("VARIABLE", score)
        assert original.clone().fields["VARIABLE"] is score

    def test_clone_nested_stacks(self):
        inner = command("looks_show")
        loop = container("control_forever", SUBSTACK=BlockStack([inner]))
        copy = loop.clone()
        assert copy.stacks["SUBSTACK"].contents[0] is not inner
        assert copy.stacks["SUBSTACK"].contents[0].opcode == "looks_show"

    def test_clone_hat_script(self):
        start = hat("event_whenflagclicked")
        start.script.add_block(command("looks_show"))
        copy = start.clone()
        assert copy.script.contents[0] is copy
        assert copy.script.contents[1].opcode == "looks_show"
        assert copy.script.contents[1] is not start.script.contents[1]


class TestCreateBlockStack:
    def test_builds_detached_stack(self):
        stack = create_block_stack(lambda s: (s.show(), s.hide()))
        assert [block.opcode for block in stack.contents] == ["looks_show", "looks_hide"]
