import json
import os
import shutil
import tempfile
import zipfile
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Tuple

from .assets import locate_resources
from .constants import EXTENSION_PREFIXES, PROJECT_JSON
from .errors import AssetNotFoundError

if TYPE_CHECKING:
    from .project import Project

# md5ext -> (path on disk, in-memory bytes); exactly one of them is set
Resources = Dict[str, Tuple[Optional[str], Optional[bytes]]]


def collect_extensions_from_blocks(blocks: Dict[str, Any], extensions: Set[str]) -> None:
    for block in blocks.values():
        opcode = block.get("opcode") or ""
        prefix = opcode.split("_", 1)[0] if "_" in opcode else ""
        ext = EXTENSION_PREFIXES.get(prefix)
        if ext:
            extensions.add(ext)


def is_archive(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in {".sb3", ".zip"}


def read_project_json(path: str) -> Any:
    """Decode project.json from an archive or a plain JSON file."""
    if not os.path.exists(path):
        return None
    if is_archive(path):
        with zipfile.ZipFile(path, "r") as archive:
            with archive.open(PROJECT_JSON) as handle:
                return json.load(handle)
    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def extract_monitor_data(path: str) -> Optional[List[Any]]:
    project = read_project_json(path)
    if not isinstance(project, dict):
        return None
    return project.get("monitors")


def collect_resources(project: "Project", strict: bool = False) -> Resources:
    """Gather asset bytes for every costume and sound of the project.

    Assets without a path or bytes are searched for in the project's asset
    directories. Missing assets raise when ``strict`` and are reported as
    warnings on their target otherwise.
    """
    resources: Resources = {}
    missing: List[Tuple[Any, Any]] = []
    for target in project.targets:
        for asset in list(target.costumes.values()) + list(target.sounds.values()):
            if asset.path is not None:
                resources[asset.md5ext] = (asset.path, None)
            elif asset.data is not None:
                resources[asset.md5ext] = (None, asset.data)
            else:
                missing.append((target, asset))

    located = locate_resources(project.asset_directories, [asset for _, asset in missing])
    for target, asset in missing:
        if asset.md5ext in located:
            resources[asset.md5ext] = (located[asset.md5ext], None)
            continue
        message = f"Asset {asset.name}.{asset.data_format} could not be located"
        if strict:
            raise AssetNotFoundError(message, "pass its path or add its directory to asset_directories")
        target.diagnostics.warning(message)
    project.collect_diagnostics()
    return resources


def write_resources(archive: zipfile.ZipFile, resources: Resources) -> None:
    for name, (path, data) in resources.items():
        if path is not None:
            archive.write(path, name)
        else:
            archive.writestr(name, data)


def write_project_json(project: "Project", path: str, indent: Optional[int] = None) -> None:
    text = project.to_json(indent)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)


def write_sb3(project: "Project", path: str, strict: bool = False) -> None:
    """Write a complete ``.sb3`` archive: project.json plus every asset."""
    text = project.to_json()
    resources = collect_resources(project, strict)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(PROJECT_JSON, text)
        write_resources(archive, resources)


def modify_project(project: "Project", path: str, add_resources: bool = False, strict: bool = False) -> None:
    """Replace project.json inside an existing archive, keeping its other entries."""
    text = project.to_json()
    resources = collect_resources(project, strict) if add_resources else {}
    handle, temp_path = tempfile.mkstemp(suffix=".sb3", dir=os.path.dirname(os.path.abspath(path)))
    os.close(handle)
    try:
        with zipfile.ZipFile(path, "r") as source, zipfile.ZipFile(
            temp_path, "w", compression=zipfile.ZIP_DEFLATED
        ) as archive:
            archive.writestr(PROJECT_JSON, text)
            for entry in source.infolist():
                if entry.filename == PROJECT_JSON or entry.filename in resources:
                    continue
                with source.open(entry) as src, archive.open(entry.filename, "w") as dst:
                    shutil.copyfileobj(src, dst)
            write_resources(archive, resources)
        os.replace(temp_path, path)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)
