"""
Equipment Catalog - The fixed set of known equipment identities.

Each identity is an opaque string key ("beaker", "test tube") with
reference text attached: a display name, a description, safety
warnings, common uses and step-by-step instructions.

The catalog is loaded once at startup and is read-only afterwards.
Its key order is the candidate order handed to the belief engine.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping
import json


@dataclass(frozen=True)
class EquipmentEntry:
    """
    Reference information for one equipment kind.
    """
    identity: str
    name: str
    description: str

    aliases: tuple[str, ...] = ()
    safety_warnings: tuple[str, ...] = ()
    usage: tuple[str, ...] = ()
    steps: tuple[str, ...] = ()

    def summary_text(self) -> str:
        """Short spoken summary."""
        return f"Detected: {self.name}. {self.description}"

    def guidance_script(self) -> list[str]:
        """Announcements for full audio guidance, in speaking order."""
        script = [f"{self.name}. {self.description}"]
        if self.safety_warnings:
            script.append("Safety warnings:")
            script.extend(_numbered(self.safety_warnings))
        if self.steps:
            script.append("Step by step instructions:")
            script.extend(_numbered(self.steps))
        return script

    @classmethod
    def from_dict(cls, identity: str, data: Mapping[str, Any]) -> EquipmentEntry:
        """
        Build an entry from catalog data.

        Accepts camelCase ("safetyWarnings") or snake_case keys.
        Raises ValueError if name or description is missing.
        """
        name = data.get("name")
        description = data.get("description")
        if not name or not description:
            raise ValueError(f"Catalog entry '{identity}' needs a name and a description")

        return cls(
            identity=identity,
            name=str(name),
            description=str(description),
            aliases=_strings(data.get("aliases")),
            safety_warnings=_strings(
                data.get("safety_warnings", data.get("safetyWarnings"))
            ),
            usage=_strings(data.get("usage")),
            steps=_strings(data.get("steps")),
        )


def _numbered(lines: tuple[str, ...]) -> list[str]:
    return [f"Step {i}: {line}" for i, line in enumerate(lines, start=1)]


def _strings(values: Any) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        raise ValueError(f"Expected a list of strings, got {values!r}")
    return tuple(str(v) for v in values)


@dataclass(frozen=True)
class EquipmentCatalog:
    """
    Ordered, read-only mapping of identity -> EquipmentEntry.

    Usage:
        catalog = EquipmentCatalog.from_dict({"beaker": {...}, "flask": {...}})
        catalog.identities      # ("beaker", "flask")
        catalog.get("beaker")   # EquipmentEntry | None
    """
    entries: tuple[EquipmentEntry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        seen = set()
        for entry in self.entries:
            if entry.identity in seen:
                raise ValueError(f"Duplicate catalog identity: {entry.identity}")
            seen.add(entry.identity)

    @property
    def identities(self) -> tuple[str, ...]:
        return tuple(entry.identity for entry in self.entries)

    def get(self, identity: str) -> EquipmentEntry | None:
        for entry in self.entries:
            if entry.identity == identity:
                return entry
        return None

    def __contains__(self, identity: object) -> bool:
        return any(entry.identity == identity for entry in self.entries)

    def __iter__(self) -> Iterator[EquipmentEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> EquipmentCatalog:
        """Build a catalog from identity -> entry data, keeping key order."""
        return cls(entries=tuple(
            EquipmentEntry.from_dict(identity, entry)
            for identity, entry in data.items()
        ))

    @classmethod
    def load_json(cls, path: str | Path) -> EquipmentCatalog:
        """Load a catalog from a JSON object file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Catalog file {path} must contain a JSON object")
        return cls.from_dict(data)
