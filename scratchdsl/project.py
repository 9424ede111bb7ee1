"""Project root: owns the targets and produces the project.json document."""

import copy
import json
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .assets import Costume, Sound
from .blocks import Block
from .constants import PROJECT_META
from .diagnostics import DiagnosticCollector
from .errors import UnsupportedOperationError
from .ids import IdGenerator, current_generator, use_id_generator
from .inputs import VlbVariant
from .project_io import collect_extensions_from_blocks, extract_monitor_data
from .targets import Sprite, Stage, Target
from .vlb import DeclarationSlot, list_contents


class Project:
    """A Scratch project under construction.

    ``id_generator`` decides how ids are drawn while this project builds and
    represents itself; ``None`` keeps whatever generator is active.
    """

    def __init__(self, id_generator: Optional[IdGenerator] = None) -> None:
        self.id_generator = id_generator
        self.stage = Stage(self)
        self.sprites: List[Sprite] = []
        self.monitors: Any = []
        self.extensions: List[Any] = []
        self.asset_directories: List[str] = []
        self.diagnostics = DiagnosticCollector()

    @classmethod
    def load(cls, representation: Any) -> "Project":
        raise UnsupportedOperationError("Loading projects is not supported", "only building is implemented")

    @property
    def targets(self) -> List[Target]:
        return [self.stage] + list(self.sprites)

    @contextmanager
    def session(self) -> Iterator[IdGenerator]:
        if self.id_generator is None:
            yield current_generator()
            return
        with use_id_generator(self.id_generator) as generator:
            yield generator

    def sprite(self, name: Optional[str] = None, body: Optional[Callable[[Sprite], Any]] = None) -> Sprite:
        """Add a sprite; ``body`` configures it right away."""
        created = Sprite(self, name or f"Sprite{len(self.sprites) + 1}")
        created.layer_order = len(self.sprites) + 1
        self.sprites.append(created)
        if body is not None:
            with self.session():
                body(created)
        return created

    # -- global declarations and slots ----------------------------------------

    def make_global_var(self, name: Optional[str] = None, value: Any = "", cloud: bool = False):
        return self.stage.make_var(name, value, cloud)

    def make_global_list(self, name: Optional[str] = None, contents: Optional[List[Any]] = None):
        return self.stage.make_list(name, contents)

    def make_broadcast(self, name: Optional[str] = None):
        return self.stage.make_broadcast(name)

    def _slot_name(self, name: Optional[str]) -> str:
        return name if name is not None else current_generator().make_random_id(6)

    def make_var_slot(self, name: Optional[str] = None, value: Any = "", cloud: bool = False) -> DeclarationSlot:
        return DeclarationSlot(self._slot_name(name), VlbVariant.VARIABLE, value, cloud)

    def make_list_slot(self, name: Optional[str] = None, contents: Optional[List[Any]] = None) -> DeclarationSlot:
        return DeclarationSlot(self._slot_name(name), VlbVariant.LIST, list_contents(contents))

    def make_broadcast_slot(self, name: Optional[str] = None) -> DeclarationSlot:
        return DeclarationSlot(self._slot_name(name), VlbVariant.BROADCAST)

    def add_backdrop(self, backdrop: Union[Costume, str], name: Optional[str] = None, **kwargs: Any) -> Costume:
        return self.stage.add_backdrop(backdrop, name, **kwargs)

    def add_sound(self, sound: Union[Sound, str], name: Optional[str] = None) -> Sound:
        return self.stage.add_sound(sound, name)

    # -- monitors and extensions ----------------------------------------------

    def attach_monitor_data(self, monitors: Any) -> None:
        """Pass monitors through verbatim; JSON text is decoded first."""
        if isinstance(monitors, str):
            monitors = json.loads(monitors)
        self.monitors = monitors

    def extract_monitor_data_from(self, path: str) -> None:
        """Take the monitors of an existing ``.sb3`` or ``project.json``."""
        monitors = extract_monitor_data(path)
        if monitors is not None:
            self.attach_monitor_data(monitors)

    def add_extension(self, extension: Any) -> None:
        self.extensions.append(extension)

    def represent_extensions(self, targets: List[Dict[str, Any]]) -> List[Any]:
        detected = set()
        for target in targets:
            collect_extensions_from_blocks(target["blocks"], detected)
        extensions = list(self.extensions)
        for extension in sorted(detected):
            if extension not in extensions:
                extensions.append(extension)
        return extensions

    # -- serialization --------------------------------------------------------

    def collect_diagnostics(self) -> DiagnosticCollector:
        self.diagnostics.clear()
        for target in self.targets:
            self.diagnostics.add_context_diagnostics(target.diagnostics)
        return self.diagnostics

    def represent(self) -> Dict[str, Any]:
        with self.session():
            placed: Dict[str, Block] = {}
            for target in self.targets:
                target.prepare(placed)
            targets = [target.represent() for target in self.targets]
        self.collect_diagnostics()
        return {
            "targets": targets,
            "monitors": self.monitors,
            "extensions": self.represent_extensions(targets),
            "meta": copy.deepcopy(PROJECT_META),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        if indent is None:
            return json.dumps(self.represent(), separators=(",", ":"))
        return json.dumps(self.represent(), indent=indent)


def build(body: Callable[[Project], Any], id_generator: Optional[IdGenerator] = None) -> Project:
    """Create a project and run ``body`` against it with the project's ids."""
    project = Project(id_generator)
    with project.session():
        body(project)
    return project
