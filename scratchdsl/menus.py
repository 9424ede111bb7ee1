"""Menu shadows, property fields and prepare-time placeholders."""

from typing import TYPE_CHECKING, Any, Callable, Optional

from .blocks import Block, as_expression, placeholder, shadow_reporter
from .constants import KeyboardKey
from .errors import UnresolvedPlaceholderError
from .inputs import Field, NodeKind

if TYPE_CHECKING:
    from .targets import Target


def _lowered(value: str) -> str:
    return value.lower().replace("-", " ").replace("_", " ").strip()


def normalize_location(value: str) -> str:
    """Normalize goto/glideto menu values to SB3 format."""
    normalized = value.strip()
    lowered = _lowered(normalized)
    if lowered in {"random position", "random"}:
        return "_random_"
    if lowered in {"mouse pointer", "mouse"}:
        return "_mouse_"
    return normalized


def normalize_direction(value: str) -> str:
    """Normalize pointtowards menu values to SB3 format."""
    normalized = value.strip()
    lowered = _lowered(normalized)
    if lowered in {"mouse pointer", "mouse"}:
        return "_mouse_"
    if lowered in {"random direction", "random"}:
        return "_random_"
    return normalized


def normalize_touching(value: str) -> str:
    normalized = value.strip()
    lowered = _lowered(normalized)
    if lowered in {"mouse pointer", "mouse"}:
        return "_mouse_"
    if lowered == "edge":
        return "_edge_"
    return normalized


def normalize_distance(value: str) -> str:
    normalized = value.strip()
    if _lowered(normalized) in {"mouse pointer", "mouse"}:
        return "_mouse_"
    return normalized


def normalize_clone(value: str) -> str:
    normalized = value.strip()
    if _lowered(normalized) == "myself":
        return "_myself_"
    return normalized


def normalize_object(value: str) -> str:
    normalized = value.strip()
    if _lowered(normalized) == "stage":
        return "_stage_"
    return normalized


def _target_name(target: Any) -> str:
    # sprites are accepted wherever a menu names a target
    return target if isinstance(target, str) else target.name


def _menu(opcode: Optional[str], field_name: str, value: str) -> Block:
    return shadow_reporter(opcode).with_field(field_name, Field(value))


def special_location(target: Any, opcode: Optional[str] = None) -> Block:
    """Location menu shared by goto and glide; the command sets the opcode."""
    return _menu(opcode, "TO", normalize_location(_target_name(target)))


def random_position(opcode: Optional[str] = None) -> Block:
    return special_location("_random_", opcode)


def mouse_pointer(opcode: Optional[str] = None) -> Block:
    return special_location("_mouse_", opcode)


def special_direction(target: Any) -> Block:
    return _menu("motion_pointtowards_menu", "TOWARDS", normalize_direction(_target_name(target)))


def clone_target(target: Any) -> Block:
    return _menu("control_create_clone_of_menu", "CLONE_OPTION", normalize_clone(_target_name(target)))


def touch_object(target: Any) -> Block:
    return _menu("sensing_touchingobjectmenu", "TOUCHINGOBJECTMENU", normalize_touching(_target_name(target)))


def distance_object(target: Any) -> Block:
    return _menu("sensing_distancetomenu", "DISTANCETOMENU", normalize_distance(_target_name(target)))


def sensing_key(key: Any) -> Block:
    if isinstance(key, KeyboardKey):
        key = key.value
    return _menu("sensing_keyoptions", "KEY_OPTION", key)


def property_target(target: Any) -> Block:
    return _menu("sensing_of_object_menu", "OBJECT", normalize_object(_target_name(target)))


def costume_menu(name: str) -> Block:
    return _menu("looks_costume", "COSTUME", name)


def backdrop_menu(name: str) -> Block:
    return _menu("looks_backdrops", "BACKDROP", name)


def sound_menu(name: str) -> Block:
    return _menu("sound_sounds_menu", "SOUND_MENU", name)


def menu_input(value: Any, factory: Callable[[Any], Block]) -> Optional[Block]:
    """Use ``factory`` for menu names and sprites, anything else as an expression."""
    if isinstance(value, str) or hasattr(value, "is_stage"):
        return factory(value)
    return as_expression(value)


class Property(Field):
    """Field naming the attribute read by ``[property] of (object)``."""

    @classmethod
    def of(cls, declaration: Any) -> "Property":
        # a variable of another sprite is addressed by name
        if getattr(declaration, "kind", None) is NodeKind.REFERENCE:
            return cls(declaration.value)
        return cls(str(declaration))


BACKDROP_NUMBER = Property("backdrop #")
BACKDROP_NAME = Property("backdrop name")
X_POSITION = Property("x position")
Y_POSITION = Property("y position")
DIRECTION = Property("direction")
COSTUME_NUMBER = Property("costume #")
COSTUME_NAME = Property("costume name")
SIZE = Property("size")
VOLUME = Property("volume")


def resolve_first_costume(target: "Target") -> Block:
    costumes = list(target.costumes.values())
    if not costumes:
        raise UnresolvedPlaceholderError("Target has no costume", f"target {target.name}")
    return costume_menu(costumes[0].name)


def resolve_first_backdrop(target: "Target") -> Block:
    backdrops = list(target.stage.costumes.values())
    if not backdrops:
        raise UnresolvedPlaceholderError("Stage has no backdrop", f"target {target.name}")
    return backdrop_menu(backdrops[0].name)


def resolve_first_sound(target: "Target") -> Block:
    sounds = list(target.sounds.values())
    return sound_menu(sounds[0].name if sounds else "")


def resolve_first_broadcast(target: "Target") -> Block:
    for scope in (target, target.stage):
        broadcasts = list(scope.broadcasts.values())
        if broadcasts:
            return broadcasts[0]
    raise UnresolvedPlaceholderError("No broadcast is declared", f"target {target.name}")


def resolve_broadcast_named(name: str) -> Callable[["Target"], Block]:
    def resolve(target: "Target") -> Block:
        for scope in (target, target.stage):
            if name in scope.broadcasts:
                return scope.broadcasts[name]
        raise UnresolvedPlaceholderError(f"Broadcast '{name}' is not declared", f"target {target.name}")

    return resolve


def named_broadcast(name: str) -> Block:
    """A broadcast looked up by name once the target's declarations are final."""
    return placeholder(None, resolve_broadcast_named(name))


def first_costume() -> Block:
    return placeholder("looks_costume", resolve_first_costume)


def first_backdrop() -> Block:
    return placeholder("looks_backdrops", resolve_first_backdrop)


def first_sound() -> Block:
    return placeholder("sound_sounds_menu", resolve_first_sound)


def first_broadcast() -> Block:
    return placeholder(None, resolve_first_broadcast)
