"""Reading snapshot references out of Maven POM files.

Only what the snapshot guard needs is modelled: coordinates and versions of
the parent, dependencies and plugins of every module in the reactor.
Versions written as ``${property}`` are resolved against the module's own
``<properties>``; references to other reactor modules are ignored since
they are released together with the project.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from relflow.core.result import Err, Ok, Result
from relflow.core.version import is_snapshot_version

__all__ = ["Coordinate", "PomError", "find_snapshot_references", "read_reactor"]

_PROPERTY = re.compile(r"\$\{([^}]+)\}")


@dataclass(frozen=True, slots=True)
class PomError:
    path: Path
    message: str


@dataclass(frozen=True, slots=True)
class Coordinate:
    group_id: str
    artifact_id: str
    version: str

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def __str__(self) -> str:
        return f"{self.key}:{self.version}"


@dataclass(frozen=True, slots=True)
class _Module:
    coordinate: Coordinate
    references: tuple[Coordinate, ...]


def read_reactor(pom_path: Path) -> Result[list[_Module], PomError]:
    """Parse ``pom_path`` and every module it lists, recursively."""
    modules: list[_Module] = []
    pending = [pom_path]
    seen: set[Path] = set()

    while pending:
        path = pending.pop(0).resolve()
        if path in seen:
            continue
        seen.add(path)

        parsed = _parse(path)
        if isinstance(parsed, Err):
            return parsed
        root = parsed.value

        modules.append(_read_module(root))
        for name in _texts(root, "modules/module"):
            child = path.parent / name
            pending.append(child / "pom.xml" if child.is_dir() or not child.suffix else child)

    return Ok(modules)


def find_snapshot_references(pom_path: Path) -> Result[list[Coordinate], PomError]:
    """Snapshot parents, dependencies and plugins from outside the reactor."""
    reactor = read_reactor(pom_path)
    if isinstance(reactor, Err):
        return reactor

    own = {m.coordinate.key for m in reactor.value}
    found: list[Coordinate] = []
    for module in reactor.value:
        for ref in module.references:
            if ref.key in own:
                continue
            if is_snapshot_version(ref.version) and ref not in found:
                found.append(ref)
    return Ok(found)


def _parse(path: Path) -> Result[ET.Element, PomError]:
    try:
        root = ET.parse(path).getroot()
    except FileNotFoundError:
        return Err(PomError(path=path, message=f"POM not found: {path}"))
    except ET.ParseError as e:
        return Err(PomError(path=path, message=f"invalid POM {path}: {e}"))
    _strip_namespaces(root)
    return Ok(root)


def _strip_namespaces(root: ET.Element) -> None:
    for el in root.iter():
        if isinstance(el.tag, str) and el.tag.startswith("{"):
            el.tag = el.tag.split("}", 1)[1]


def _read_module(root: ET.Element) -> _Module:
    parent = root.find("parent")
    properties = _properties(root)

    parent_coord: Coordinate | None = None
    if parent is not None:
        parent_coord = _coordinate(parent, properties, default_group="")

    group_id = _text(root, "groupId") or (parent_coord.group_id if parent_coord else "")
    version = _text(root, "version") or (parent_coord.version if parent_coord else "")
    properties.setdefault("project.version", version)
    properties.setdefault("project.groupId", group_id)

    refs: list[Coordinate] = []
    if parent_coord is not None:
        refs.append(parent_coord)
    for path in (
        "dependencies/dependency",
        "dependencyManagement/dependencies/dependency",
        "build/plugins/plugin",
        "build/pluginManagement/plugins/plugin",
    ):
        for el in root.findall(path):
            coord = _coordinate(el, properties, default_group="org.apache.maven.plugins")
            if coord.version:
                refs.append(coord)

    own = Coordinate(group_id=group_id, artifact_id=_text(root, "artifactId"), version=version)
    return _Module(coordinate=own, references=tuple(refs))


def _coordinate(el: ET.Element, properties: dict[str, str], *, default_group: str) -> Coordinate:
    return Coordinate(
        group_id=_resolve(_text(el, "groupId"), properties) or default_group,
        artifact_id=_resolve(_text(el, "artifactId"), properties),
        version=_resolve(_text(el, "version"), properties),
    )


def _properties(root: ET.Element) -> dict[str, str]:
    props: dict[str, str] = {}
    node = root.find("properties")
    if node is None:
        return props
    for child in node:
        if isinstance(child.tag, str):
            props[child.tag] = (child.text or "").strip()
    return props


def _resolve(value: str, properties: dict[str, str]) -> str:
    # Two passes cover a property defined in terms of another one.
    for _ in range(2):
        value = _PROPERTY.sub(lambda m: properties.get(m.group(1), m.group(0)), value)
    return value


def _text(el: ET.Element, path: str) -> str:
    found = el.find(path)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def _texts(el: ET.Element, path: str) -> list[str]:
    return [(n.text or "").strip() for n in el.findall(path) if (n.text or "").strip()]
