import hashlib
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from PIL import Image

from .blocks import Block
from .inputs import Field
from .menus import backdrop_menu, costume_menu, sound_menu

BITMAP_FORMATS = {"png", "jpg", "jpeg", "gif", "bmp", "webp"}


def checksum(path: str) -> str:
    with open(path, "rb") as handle:
        return hashlib.md5(handle.read()).hexdigest()


def checksum_bytes(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def file_extension(path: str) -> str:
    return os.path.splitext(path)[1].lower().lstrip(".")


def probe_image_size(path: str, ext: str) -> Optional[Tuple[float, float]]:
    ext = ext.lower()

    if ext in BITMAP_FORMATS:
        try:
            with Image.open(path) as img:
                w, h = img.size
                return float(w), float(h)
        except OSError:
            return None

    if ext == "svg":
        try:
            with open(path, "r", encoding="utf-8", errors="ignore") as handle:
                content = handle.read(2000)
        except OSError:
            return None
        width_match = re.search(r"width=\"([0-9.]+)", content)
        height_match = re.search(r"height=\"([0-9.]+)", content)
        if width_match and height_match:
            return float(width_match.group(1)), float(height_match.group(1))
        viewbox_match = re.search(r"viewBox=\"-?[0-9.]+ -?[0-9.]+ ([0-9.]+) ([0-9.]+)\"", content)
        if viewbox_match:
            return float(viewbox_match.group(1)), float(viewbox_match.group(2))

    return None


@dataclass
class Costume:
    """A costume entry of a target. Usable as a costume menu expression."""
    name: str
    data_format: str
    asset_id: str
    rotation_center: Optional[Tuple[float, float]] = None
    bitmap_resolution: int = 1
    path: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)

    @property
    def md5ext(self) -> str:
        return f"{self.asset_id}.{self.data_format}"

    def represent(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "assetId": self.asset_id,
            "dataFormat": self.data_format,
            "md5ext": self.md5ext,
            "name": self.name,
            "bitmapResolution": self.bitmap_resolution,
        }
        if self.rotation_center is not None:
            entry["rotationCenterX"] = self.rotation_center[0]
            entry["rotationCenterY"] = self.rotation_center[1]
        return entry

    def field_value(self) -> Field:
        return Field(self.name)

    def as_block(self) -> Block:
        return costume_menu(self.name)


@dataclass
class Backdrop(Costume):
    """A stage costume. Used as an expression it selects a backdrop."""

    def as_block(self) -> Block:
        return backdrop_menu(self.name)


@dataclass
class Sound:
    name: str
    data_format: str
    asset_id: str
    rate: Optional[int] = None
    sample_count: Optional[int] = None
    path: Optional[str] = None
    data: Optional[bytes] = field(default=None, repr=False)

    @property
    def md5ext(self) -> str:
        return f"{self.asset_id}.{self.data_format}"

    def represent(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "assetId": self.asset_id,
            "dataFormat": self.data_format,
            "md5ext": self.md5ext,
            "name": self.name,
        }
        if self.rate is not None:
            entry["rate"] = self.rate
        if self.sample_count is not None:
            entry["sampleCount"] = self.sample_count
        return entry

    def field_value(self) -> Field:
        return Field(self.name)

    def as_block(self) -> Block:
        return sound_menu(self.name)


def default_rotation_center(path: str, ext: str, bitmap_resolution: int) -> Optional[Tuple[float, float]]:
    """Centre of the image in costume coordinates; SVGs are centred at the origin."""
    if ext == "svg":
        return 0, 0
    size = probe_image_size(path, ext)
    if size is None:
        return None
    return size[0] / 2 / bitmap_resolution, size[1] / 2 / bitmap_resolution


def load_costume(
    path: str,
    name: Optional[str] = None,
    bitmap_resolution: Optional[int] = None,
    rotation_center: Optional[Tuple[float, float]] = None,
    costume_class: type = Costume,
) -> Costume:
    ext = file_extension(path)
    if bitmap_resolution is None:
        bitmap_resolution = 1 if ext == "svg" else 2
    if rotation_center is None:
        rotation_center = default_rotation_center(path, ext, bitmap_resolution)
    return costume_class(
        name=name or os.path.splitext(os.path.basename(path))[0],
        data_format=ext,
        asset_id=checksum(path),
        rotation_center=rotation_center,
        bitmap_resolution=bitmap_resolution,
        path=path,
    )


def load_backdrop(path: str, name: Optional[str] = None, **kwargs: Any) -> Backdrop:
    return load_costume(path, name, costume_class=Backdrop, **kwargs)


def load_sound(path: str, name: Optional[str] = None) -> Sound:
    return Sound(
        name=name or os.path.splitext(os.path.basename(path))[0],
        data_format=file_extension(path),
        asset_id=checksum(path),
        path=path,
    )


def locate_resources(directories: Iterable[str], assets: List[Any]) -> Dict[str, str]:
    """Find files for assets that carry neither a path nor bytes.

    A file named after the asset's ``md5ext`` wins over ``name.ext``. Returns
    ``md5ext -> path`` for every asset found.
    """
    found: Dict[str, str] = {}
    for directory in directories:
        if not os.path.isdir(directory):
            continue
        files = {
            fname: os.path.join(directory, fname)
            for fname in sorted(os.listdir(directory))
            if os.path.isfile(os.path.join(directory, fname))
        }
        for asset in assets:
            if asset.md5ext in found:
                continue
            for candidate in (asset.md5ext, f"{asset.name}.{asset.data_format}"):
                if candidate in files:
                    found[asset.md5ext] = files[candidate]
                    break
    return found
