"""Tests for scratchdsl.project: the full document, determinism and passthrough data."""

import json

import pytest

from scratchdsl.blocks import command, number
from scratchdsl.errors import BlockAlreadyAttachedError, UnresolvedPlaceholderError, UnsupportedOperationError
from scratchdsl.ids import IdGenerator
from scratchdsl.project import Project, build
from scratchdsl.reporters import x_position


def _blocks(document, index=1):
    return document["targets"][index]["blocks"]


def _by_opcode(blocks, opcode):
    return [block_id for block_id, entry in blocks.items() if entry["opcode"] == opcode]


class TestScripts:
    def test_repeat_scenario(self, sprite, project):
        x = sprite.make_var("x")
        sprite.when_flag_clicked(lambda s: (
            s.set_variable(x, 5),
            s.repeat(3, lambda r: r.change_variable_by(x, 1)),
        ))
        blocks = _blocks(project.represent())
        assert len(blocks) == 4

        (start_id,) = _by_opcode(blocks, "event_whenflagclicked")
        (set_id,) = _by_opcode(blocks, "data_setvariableto")
        (repeat_id,) = _by_opcode(blocks, "control_repeat")
        (change_id,) = _by_opcode(blocks, "data_changevariableby")

        start = blocks[start_id]
        assert start["topLevel"] is True
        assert (start["x"], start["y"]) == (0, 0)
        assert start["next"] == set_id
        assert start["parent"] is None

        assert blocks[set_id]["inputs"]["VALUE"] == [1, [10, "5"]]
        assert blocks[set_id]["fields"]["VARIABLE"] == ["x", x.id]
        assert blocks[set_id]["next"] == repeat_id
        assert blocks[set_id]["parent"] is None

        assert blocks[repeat_id]["inputs"]["TIMES"] == [1, [6, "3"]]
        assert blocks[repeat_id]["inputs"]["SUBSTACK"] == [2, change_id]
        assert blocks[repeat_id]["next"] is None

        assert blocks[change_id]["inputs"]["VALUE"] == [1, [4, "1"]]
        assert blocks[change_id]["parent"] == repeat_id
        assert blocks[change_id]["next"] is None

    def test_missing_argument_uses_default_shadow(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.move_steps())
        blocks = _blocks(project.represent())
        (move_id,) = _by_opcode(blocks, "motion_movesteps")
        assert blocks[move_id]["inputs"] == {"STEPS": [1, [4, "10"]]}

    def test_reporter_obscures_shadow(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.move_steps(x_position()))
        blocks = _blocks(project.represent())
        (move_id,) = _by_opcode(blocks, "motion_movesteps")
        (reporter_id,) = _by_opcode(blocks, "motion_xposition")
        assert blocks[move_id]["inputs"]["STEPS"] == [3, reporter_id, [4, "10"]]
        assert blocks[reporter_id]["parent"] == move_id
        assert blocks[reporter_id]["topLevel"] is False

    def test_costume_placeholder_resolves_to_default_costume(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.switch_costume_to())
        blocks = _blocks(project.represent())
        (menu_id,) = _by_opcode(blocks, "looks_costume")
        assert blocks[menu_id]["fields"] == {"COSTUME": ["costume1", None]}
        assert blocks[menu_id]["shadow"] is True

    def test_broadcast_placeholder_resolves_to_message1(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.broadcast())
        document = project.represent()
        (message_id,) = document["targets"][0]["broadcasts"]
        blocks = _blocks(document)
        (broadcast_id,) = _by_opcode(blocks, "event_broadcast")
        assert blocks[broadcast_id]["inputs"]["BROADCAST_INPUT"] == [1, [11, "message1", message_id]]

    def test_each_placeholder_use_resolves_separately(self, sprite, project):
        sprite.when_flag_clicked(lambda s: (s.switch_costume_to(), s.switch_costume_to()))
        blocks = _blocks(project.represent())
        assert len(_by_opcode(blocks, "looks_costume")) == 2

    def test_costume_by_name(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.switch_costume_to("costume1"))
        blocks = _blocks(project.represent())
        (switch_id,) = _by_opcode(blocks, "looks_switchcostumeto")
        (menu_id,) = _by_opcode(blocks, "looks_costume")
        assert blocks[switch_id]["inputs"]["COSTUME"] == [1, menu_id]
        assert blocks[menu_id]["parent"] == switch_id

    def test_broadcast_by_name(self, sprite, project):
        go = project.make_broadcast("go")
        sprite.when_flag_clicked(lambda s: s.broadcast_and_wait("go"))
        blocks = _blocks(project.represent())
        (broadcast_id,) = _by_opcode(blocks, "event_broadcastandwait")
        assert blocks[broadcast_id]["inputs"]["BROADCAST_INPUT"] == [1, [11, "go", go.id]]

    def test_undeclared_broadcast_name(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.broadcast("nobody"))
        with pytest.raises(UnresolvedPlaceholderError):
            project.represent()


class TestSharing:
    def test_reporter_in_two_sprites(self, sprite, project):
        dog = project.sprite("Dog")
        shared = x_position()
        sprite.when_flag_clicked(lambda s: s.move_steps(shared))
        dog.when_flag_clicked(lambda s: s.turn_right(shared))
        with pytest.raises(BlockAlreadyAttachedError):
            project.represent()

    def test_reporter_twice_in_one_sprite(self, sprite, project):
        shared = x_position()
        sprite.when_flag_clicked(lambda s: (s.move_steps(shared), s.turn_right(shared)))
        with pytest.raises(BlockAlreadyAttachedError):
            project.represent()

    def test_clones_in_two_sprites(self, sprite, project):
        dog = project.sprite("Dog")
        shared = x_position()
        sprite.when_flag_clicked(lambda s: s.move_steps(shared))
        dog.when_flag_clicked(lambda s: s.turn_right(shared.clone()))
        document = project.represent()
        for index in (1, 2):
            blocks = _blocks(document, index)
            (reporter_id,) = _by_opcode(blocks, "motion_xposition")
            assert blocks[blocks[reporter_id]["parent"]]["opcode"] in ("motion_movesteps", "motion_turnright")


class TestDocument:
    def test_top_level_shape(self, project):
        document = project.represent()
        assert list(document) == ["targets", "monitors", "extensions", "meta"]
        assert document["meta"] == {
            "agent": "",
            "tool": {"url": "https://github.com/scratch-api/scratch-dsl"},
            "semver": "3.0.0",
            "vm": "0.2.0",
        }
        assert document["monitors"] == []
        assert document["extensions"] == []

    def test_stage_comes_first(self, project):
        project.sprite("A")
        project.sprite("B")
        names = [target["name"] for target in project.represent()["targets"]]
        assert names == ["Stage", "A", "B"]

    def test_default_sprite_names(self, project):
        assert project.sprite().name == "Sprite1"
        assert project.sprite().name == "Sprite2"

    def test_meta_is_a_copy(self, project):
        project.represent()["meta"]["agent"] = "changed"
        assert project.represent()["meta"]["agent"] == ""

    def test_to_json_is_compact(self, project):
        text = project.to_json()
        assert ", " not in text
        assert json.loads(text)["meta"]["semver"] == "3.0.0"

    def test_to_json_indent(self, project):
        assert "\n" in project.to_json(indent=2)

    def test_represent_twice_is_stable(self, sprite, project):
        sprite.when_flag_clicked(lambda s: s.move_steps(5))
        assert project.to_json() == project.to_json()

    def test_load_is_unsupported(self):
        with pytest.raises(UnsupportedOperationError):
            Project.load({})


class TestDeterminism:
    @staticmethod
    def _sample(project):
        score = project.make_global_var("score", 0)
        cat = project.sprite("Cat")
        jump = cat.procedure("jump")
        height = jump.number("height")
        jump.implement(lambda s: s.change_y_by(height))
        cat.when_flag_clicked(lambda s: (
            s.set(score, 0),
            s.repeat(10, lambda r: (r.call(jump, 10), r.change_by(score, 1))),
        ))

    def test_same_build_same_document(self):
        first = build(self._sample, IdGenerator.counting()).to_json()
        second = build(self._sample, IdGenerator.counting()).to_json()
        assert first == second

    def test_project_generator_is_used(self):
        project = build(self._sample, IdGenerator.counting(start=1000))
        document = project.represent()
        ids = set(document["targets"][1]["blocks"])
        assert all(len(block_id) == 2 for block_id in ids)


class TestExtensions:
    def test_detected_from_opcodes(self, sprite, project):
        start = sprite.when_flag_clicked()
        start.script.add_block(command("pen_clear"))
        start.script.add_block(command("pen_penDown"))
        assert project.represent()["extensions"] == ["pen"]

    def test_explicit_extension_not_duplicated(self, sprite, project):
        project.add_extension("pen")
        start = sprite.when_flag_clicked()
        start.script.add_block(command("pen_clear"))
        start.script.add_block(command("music_playDrumForBeats").with_expression("BEATS", None, number("0.25")))
        assert project.represent()["extensions"] == ["pen", "music"]


class TestMonitors:
    def test_monitor_json_text(self, project):
        project.attach_monitor_data('[{"id": "m1", "mode": "default"}]')
        assert project.represent()["monitors"] == [{"id": "m1", "mode": "default"}]

    def test_monitor_value_passthrough(self, project):
        monitors = [{"id": "m2"}]
        project.attach_monitor_data(monitors)
        assert project.represent()["monitors"] is monitors


class TestDiagnostics:
    def test_injections_are_reported(self, sprite, project):
        project.represent()
        diagnostics = project.diagnostics
        assert diagnostics.summary() == "3 notes"
        assert {d.target for d in diagnostics.all_diagnostics} == {"Stage", "Cat"}
