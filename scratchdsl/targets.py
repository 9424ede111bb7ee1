"""Stage and sprites: scripts, declarations, assets and their serialization."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple, Union

from .assets import Costume, Sound, load_backdrop, load_costume, load_sound
from .blocks import Block, BlockStack, IsolatedStack, Script, as_expression, hat, number
from .constants import (
    DEFAULT_BROADCAST_NAME,
    DEFAULT_COSTUME_ASSET_ID,
    DEFAULT_COSTUME_NAME,
    DEFAULT_COSTUME_SVG,
    SPRITE_DEFAULTS,
    STAGE_DEFAULTS,
    KeyboardKey,
    WhenGreaterThanMenu,
)
from .diagnostics import DiagnosticContext
from .errors import BlockAlreadyAttachedError, DuplicateNameError, UnsupportedOperationError
from .ids import current_generator, make_id
from .inputs import Field, VlbVariant
from .procedures import ProcedureBuilder
from .script import StackBuilder
from .vlb import DeclarationSlot, declare, list_contents

if TYPE_CHECKING:
    from .project import Project

Body = Callable[[StackBuilder], Any]


@dataclass
class Declared:
    """A declaration together with its initial value."""
    block: Block
    value: Any = ""
    cloud: bool = False


@dataclass
class Comment:
    text: str
    block: Optional[Any] = None
    width: float = 200
    height: float = 200
    minimized: bool = False
    position: Tuple[float, float] = (0, 0)
    _id: Optional[str] = field(default=None, repr=False)

    @property
    def id(self) -> str:
        if self._id is None:
            self._id = make_id()
        return self._id

    def represent(self) -> Dict[str, Any]:
        return {
            "blockId": self.block.id if self.block is not None else None,
            "width": self.width,
            "height": self.height,
            "minimized": self.minimized,
            "text": self.text,
            "x": self.position[0],
            "y": self.position[1],
        }


class Target:
    """Common part of the stage and sprites."""

    is_stage = False

    def __init__(self, project: "Project", name: str) -> None:
        self.project = project
        self.name = name
        self.scripts: List[Script] = []
        self.declarations: Dict[VlbVariant, Dict[str, Declared]] = {variant: {} for variant in VlbVariant}
        self.costumes: Dict[str, Costume] = {}
        self.sounds: Dict[str, Sound] = {}
        self.comments: List[Comment] = []
        self.current_costume = 0
        self.layer_order = 0
        self.volume = 100
        self.blocks: Dict[str, Block] = {}
        self.diagnostics = DiagnosticContext(target_name=name)
        self._scramble_names = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    @property
    def stage(self) -> "Stage":
        return self.project.stage

    @property
    def variables(self) -> Dict[str, Declared]:
        return self.declarations[VlbVariant.VARIABLE]

    @property
    def lists(self) -> Dict[str, Declared]:
        return self.declarations[VlbVariant.LIST]

    @property
    def broadcasts(self) -> Dict[str, Block]:
        return {name: entry.block for name, entry in self.declarations[VlbVariant.BROADCAST].items()}

    @classmethod
    def load(cls, representation: Any) -> "Target":
        raise UnsupportedOperationError("Loading targets is not supported", cls.__name__)

    # -- declarations ---------------------------------------------------------

    def conflicting_scopes(self) -> List["Target"]:
        raise NotImplementedError

    def _declare(self, name: Optional[str], variant: VlbVariant, value: Any = "", cloud: bool = False) -> Block:
        if name is None or self._scramble_names:
            name = current_generator().make_random_id(6)
        for scope in self.conflicting_scopes():
            if name in scope.declarations[variant]:
                raise DuplicateNameError(
                    f"The {variant.name.lower()} name '{name}' is already used",
                    f"declared on target {scope.name}",
                )
        declared = declare(name, variant)
        self.declarations[variant][name] = Declared(declared, value, cloud)
        return declared

    def make_var(self, name: Optional[str] = None, value: Any = "", cloud: bool = False) -> Block:
        return self._declare(name, VlbVariant.VARIABLE, value, cloud)

    def make_list(self, name: Optional[str] = None, contents: Optional[List[Any]] = None) -> Block:
        return self._declare(name, VlbVariant.LIST, list_contents(contents))

    def make_broadcast(self, name: Optional[str] = None) -> Block:
        return self._declare(name, VlbVariant.BROADCAST)

    def add_slot(self, slot: DeclarationSlot) -> Block:
        """Declare ``slot`` here, reusing its id."""
        declared = self._declare(slot.name, slot.variant, slot.value, slot.cloud)
        declared.id = slot.id
        return declared

    def scramble_local_names(self) -> None:
        """Give every declaration made after this call a random name."""
        self._scramble_names = True

    # -- assets ---------------------------------------------------------------

    def add_costume(self, costume: Union[Costume, str], name: Optional[str] = None, **kwargs: Any) -> Costume:
        if not isinstance(costume, Costume):
            costume = load_costume(costume, name, **kwargs)
        self.costumes[costume.name] = costume
        return costume

    def add_sound(self, sound: Union[Sound, str], name: Optional[str] = None) -> Sound:
        if not isinstance(sound, Sound):
            sound = load_sound(sound, name)
        self.sounds[sound.name] = sound
        return sound

    def add_comment(self, text: str, block: Optional[Any] = None, **kwargs: Any) -> Comment:
        comment = Comment(text, block, **kwargs)
        self.comments.append(comment)
        return comment

    # -- scripts --------------------------------------------------------------

    def add_script(self, script: Script) -> Script:
        self.scripts.append(script)
        return script

    def _hat(self, block: Block, body: Optional[Body]) -> Block:
        self.add_script(block)
        if body is not None:
            body(StackBuilder(block.script))
        return block

    def when_flag_clicked(self, body: Optional[Body] = None) -> Block:
        return self._hat(hat("event_whenflagclicked"), body)

    def when_key_pressed(self, key: Union[KeyboardKey, str], body: Optional[Body] = None) -> Block:
        if isinstance(key, KeyboardKey):
            key = key.value
        return self._hat(hat("event_whenkeypressed").with_field("KEY_OPTION", Field(key)), body)

    def when_this_sprite_clicked(self, body: Optional[Body] = None) -> Block:
        opcode = "event_whenstageclicked" if self.is_stage else "event_whenthisspriteclicked"
        return self._hat(hat(opcode), body)

    def when_backdrop_switches_to(self, backdrop: Union[Costume, str], body: Optional[Body] = None) -> Block:
        if isinstance(backdrop, str):
            backdrop = Field(backdrop)
        return self._hat(hat("event_whenbackdropswitchesto").with_field("BACKDROP", backdrop), body)

    def when_greater_than(self, menu: WhenGreaterThanMenu, value: Any = None, body: Optional[Body] = None) -> Block:
        block = (
            hat("event_whengreaterthan")
            .with_expression("VALUE", as_expression(value), number("10"))
            .with_field("WHENGREATERTHANMENU", Field(menu.value))
        )
        return self._hat(block, body)

    def when_i_receive(self, message: Block, body: Optional[Body] = None) -> Block:
        return self._hat(hat("event_whenbroadcastreceived").with_field("BROADCAST_OPTION", message), body)

    def when_i_start_as_clone(self, body: Optional[Body] = None) -> Block:
        return self._hat(hat("control_start_as_clone"), body)

    def isolated(self, body: Optional[Body] = None) -> IsolatedStack:
        """A script without a hat block."""
        script = IsolatedStack(BlockStack())
        if body is not None:
            body(StackBuilder(script.script))
        self.add_script(script)
        return script

    def procedure(self, name: str, warp: bool = False) -> ProcedureBuilder:
        return ProcedureBuilder(self, name, warp)

    # -- serialization --------------------------------------------------------

    def inject_defaults(self) -> None:
        if not self.costumes:
            self.add_costume(
                Costume(
                    DEFAULT_COSTUME_NAME,
                    "svg",
                    DEFAULT_COSTUME_ASSET_ID,
                    rotation_center=(0, 0),
                    data=DEFAULT_COSTUME_SVG,
                )
            )
            self.diagnostics.info(f"Added blank costume '{DEFAULT_COSTUME_NAME}'")

    def prepare(self, placed: Optional[Dict[str, Block]] = None) -> None:
        """Resolve placeholders and flatten every script into ``self.blocks``.

        ``placed`` collects the blocks of targets prepared earlier in the same
        pass; a block already found there is used by two targets.
        """
        self.diagnostics.target_name = self.name
        self.inject_defaults()
        for script in self.scripts:
            script.prepare(self)
        table: Dict[str, Block] = {}
        for script in self.scripts:
            script.script.flatten_into(table)
        if placed is not None:
            for block_id, block in table.items():
                if placed.get(block_id) is block:
                    raise BlockAlreadyAttachedError(
                        "Block is used by more than one target", f"opcode {block.opcode} on target {self.name}"
                    )
            placed.update(table)
        self.blocks = table

    def represent_variables(self) -> Dict[str, Any]:
        variables: Dict[str, Any] = {}
        for name, entry in self.variables.items():
            value = [name, entry.value]
            if entry.cloud:
                value.append(True)
            variables[entry.block.id] = value
        return variables

    def represent(self) -> Dict[str, Any]:
        return {
            "broadcasts": {entry.block.id: name for name, entry in self.declarations[VlbVariant.BROADCAST].items()},
            "variables": self.represent_variables(),
            "lists": {entry.block.id: [name, entry.value] for name, entry in self.lists.items()},
            "comments": {comment.id: comment.represent() for comment in self.comments},
            "costumes": [costume.represent() for costume in self.costumes.values()],
            "sounds": [sound.represent() for sound in self.sounds.values()],
            "name": self.name,
            "currentCostume": self.current_costume,
            "isStage": self.is_stage,
            "layerOrder": self.layer_order,
            "volume": self.volume,
            "blocks": {block_id: block.represent() for block_id, block in self.blocks.items()},
        }


class Stage(Target):
    """The stage: global declarations, backdrops and project-wide settings."""

    is_stage = True

    def __init__(self, project: "Project") -> None:
        super().__init__(project, "Stage")
        self.tempo = STAGE_DEFAULTS["tempo"]
        self.text_to_speech_language = STAGE_DEFAULTS["textToSpeechLanguage"]
        self.video_state = STAGE_DEFAULTS["videoState"]
        self.video_transparency = STAGE_DEFAULTS["videoTransparency"]
        self.volume = STAGE_DEFAULTS["volume"]

    @property
    def stage(self) -> "Stage":
        return self

    @property
    def backdrops(self) -> List[Costume]:
        return list(self.costumes.values())

    def conflicting_scopes(self) -> List[Target]:
        return [self] + list(self.project.sprites)

    def add_backdrop(self, backdrop: Union[Costume, str], name: Optional[str] = None, **kwargs: Any) -> Costume:
        if not isinstance(backdrop, Costume):
            backdrop = load_backdrop(backdrop, name, **kwargs)
        return self.add_costume(backdrop)

    def inject_defaults(self) -> None:
        super().inject_defaults()
        if not self.broadcasts:
            self.make_broadcast(DEFAULT_BROADCAST_NAME)
            self.diagnostics.info(f"Added broadcast '{DEFAULT_BROADCAST_NAME}'")

    def represent(self) -> Dict[str, Any]:
        target = super().represent()
        target["tempo"] = self.tempo
        target["textToSpeechLanguage"] = self.text_to_speech_language
        target["videoState"] = self.video_state
        target["videoTransparency"] = self.video_transparency
        return target


class Sprite(Target):
    """A sprite: local declarations, costumes and its on-stage state."""

    def __init__(self, project: "Project", name: str) -> None:
        super().__init__(project, name)
        self.visible = SPRITE_DEFAULTS["visible"]
        self.x = SPRITE_DEFAULTS["x"]
        self.y = SPRITE_DEFAULTS["y"]
        self.size = SPRITE_DEFAULTS["size"]
        self.direction = SPRITE_DEFAULTS["direction"]
        self.draggable = SPRITE_DEFAULTS["draggable"]
        self.rotation_style = SPRITE_DEFAULTS["rotationStyle"]
        self.volume = SPRITE_DEFAULTS["volume"]

    def conflicting_scopes(self) -> List[Target]:
        return [self, self.stage]

    def represent(self) -> Dict[str, Any]:
        target = super().represent()
        target["visible"] = self.visible
        target["x"] = self.x
        target["y"] = self.y
        target["size"] = self.size
        target["direction"] = self.direction
        target["draggable"] = self.draggable
        target["rotationStyle"] = self.rotation_style
        return target
