"""Constants used throughout project construction and serialization."""

import string
from enum import Enum
from typing import Any, Dict

# Identifier alphabet, in the order digits are emitted by the counting policy
ID_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
ID_LENGTH = 16

# Leading status code of an input entry
INPUT_SAME_BLOCK_SHADOW = 1
INPUT_NO_SHADOW = 2
INPUT_DIFF_BLOCK_SHADOW = 3

# Literal type codes and the shadow opcodes they stand for
MATH_NUM_PRIMITIVE = 4
POSITIVE_NUM_PRIMITIVE = 5
WHOLE_NUM_PRIMITIVE = 6
INTEGER_NUM_PRIMITIVE = 7
ANGLE_NUM_PRIMITIVE = 8
COLOR_PICKER_PRIMITIVE = 9
TEXT_PRIMITIVE = 10
BROADCAST_PRIMITIVE = 11
VAR_PRIMITIVE = 12
LIST_PRIMITIVE = 13

LITERAL_OPCODES: Dict[str, int] = {
    "math_number": MATH_NUM_PRIMITIVE,
    "math_positive_number": POSITIVE_NUM_PRIMITIVE,
    "math_whole_number": WHOLE_NUM_PRIMITIVE,
    "math_integer": INTEGER_NUM_PRIMITIVE,
    "math_angle": ANGLE_NUM_PRIMITIVE,
    "colour_picker": COLOR_PICKER_PRIMITIVE,
    "text": TEXT_PRIMITIVE,
}

# Known extension opcode prefixes to emit in project.json
EXTENSION_PREFIXES: Dict[str, str] = {
    "pen": "pen",
    "music": "music",
    "text2speech": "text2speech",
    "translate": "translate",
    "videoSensing": "videoSensing",
    "ev3": "ev3",
    "microbit": "microbit",
    "wedo2": "wedo2",
    "makeymakey": "makeymakey",
    "boost": "boost",
    "gdxfor": "gdxfor",
}

PROJECT_META: Dict[str, Any] = {
    "agent": "",
    "tool": {"url": "https://github.com/scratch-api/scratch-dsl"},
    "semver": "3.0.0",
    "vm": "0.2.0",
}

# Blank costume injected into targets that declare none
DEFAULT_COSTUME_NAME = "costume1"
DEFAULT_COSTUME_ASSET_ID = "de342ccf4bbe18d30bcacafb819dd91f"
DEFAULT_COSTUME_SVG = (
    b'<svg version="1.1" width="2" height="2" viewBox="-1 -1 2 2" '
    b'xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink">'
    b"\\n  <!-- Exported by Scratch - http://scratch.mit.edu/ -->\\n</svg>"
)

DEFAULT_BROADCAST_NAME = "message1"

STAGE_DEFAULTS: Dict[str, Any] = {
    "tempo": 60,
    "textToSpeechLanguage": None,
    "videoState": "on",
    "videoTransparency": 50,
    "volume": 100,
}

SPRITE_DEFAULTS: Dict[str, Any] = {
    "visible": True,
    "x": 0,
    "y": 0,
    "size": 100,
    "direction": 90,
    "draggable": False,
    "rotationStyle": "all around",
    "volume": 100,
}

PROJECT_JSON = "project.json"


class RotationStyle(Enum):
    LEFT_RIGHT = "left-right"
    DONT_ROTATE = "don't rotate"
    ALL_AROUND = "all around"


class LooksEffect(Enum):
    COLOR = "COLOR"
    FISHEYE = "FISHEYE"
    WHIRL = "WHIRL"
    PIXELATE = "PIXELATE"
    MOSAIC = "MOSAIC"
    BRIGHTNESS = "BRIGHTNESS"
    GHOST = "GHOST"


class SpecialLayer(Enum):
    FRONT = "front"
    BACK = "back"


class LayerDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class SoundEffect(Enum):
    PITCH = "PITCH"
    PAN = "PAN"


class WhenGreaterThanMenu(Enum):
    LOUDNESS = "LOUDNESS"
    TIMER = "TIMER"


class StopType(Enum):
    ALL = "all"
    THIS_SCRIPT = "this script"
    OTHER_SCRIPTS_IN_SPRITE = "other scripts in sprite"


class DragMode(Enum):
    DRAGGABLE = "draggable"
    NOT_DRAGGABLE = "not draggable"


class TimeUnit(Enum):
    YEAR = "YEAR"
    MONTH = "MONTH"
    DATE = "DATE"
    DAY_OF_WEEK = "DAYOFWEEK"
    HOUR = "HOUR"
    MINUTE = "MINUTE"
    SECOND = "SECOND"


class MathOp(Enum):
    ABS = "abs"
    FLOOR = "floor"
    CEILING = "ceiling"
    SQRT = "sqrt"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    LN = "ln"
    LOG = "log"
    EXP = "e ^"
    POW10 = "10 ^"


class KeyboardKey(Enum):
    SPACE = "space"
    LEFT_ARROW = "left arrow"
    RIGHT_ARROW = "right arrow"
    UP_ARROW = "up arrow"
    DOWN_ARROW = "down arrow"
    ENTER = "enter"
    ANY = "any"


# Sprite property names accepted by "[property] of (object)"
SENSING_OF_PROPERTIES = (
    "backdrop #",
    "backdrop name",
    "x position",
    "y position",
    "direction",
    "costume #",
    "costume name",
    "size",
    "volume",
)
