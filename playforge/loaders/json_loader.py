"""Load level content from JSON definitions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from ..domain.levels import LevelDefinition

if TYPE_CHECKING:
    from ..domain.levels import LevelService


async def load_levels_from_json(service: "LevelService", path: str | Path) -> Sequence[LevelDefinition]:
    """Load levels from a JSON file and register them with the level service."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    levels = parse_levels_dict(data)
    for level in levels:
        await service.register(level)
    return levels


def parse_levels_dict(data: dict[str, Any]) -> tuple[LevelDefinition, ...]:
    """Parse a JSON dict (already decoded) into level definitions."""
    errors = validate_levels_dict(data)
    if errors:
        raise ValueError(_format_errors("Level validation failed", errors))
    return tuple(parse_level(entry) for entry in data.get("levels", []))


def parse_level(entry: dict[str, Any]) -> LevelDefinition:
    return LevelDefinition(
        level_id=int(entry["id"]),
        name=str(entry.get("name", f"Level {entry['id']}")),
        reward=int(entry["reward"]),
        energy_cost=int(entry.get("energyCost", 0)),
        metadata=dict(entry.get("metadata", {})),
    )


def validate_levels_file(path: str | Path) -> list[str]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except FileNotFoundError:
        return [f"File {path} does not exist"]
    except json.JSONDecodeError as exc:
        return [f"Invalid JSON in {path}: {exc}"]
    return validate_levels_dict(data)


def validate_levels_dict(data: Any) -> list[str]:
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Root element must be a JSON object"]

    levels = data.get("levels")
    if not isinstance(levels, list):
        return ["'levels' must be a list"]

    seen: set[int] = set()
    for index, entry in enumerate(levels):
        errors.extend(_validate_level(entry, index, seen))
    return errors


def _validate_level(entry: Any, index: int, seen: set[int]) -> Iterable[str]:
    label = f"levels[{index}]"
    if not isinstance(entry, dict):
        yield f"{label} must be an object"
        return

    level_id = entry.get("id")
    if not isinstance(level_id, int) or isinstance(level_id, bool) or level_id <= 0:
        yield f"{label}.id must be a positive integer"
    elif level_id in seen:
        yield f"{label}.id {level_id} is duplicated"
    else:
        seen.add(level_id)

    if "reward" not in entry:
        yield f"{label}.reward is required"
    elif not _is_non_negative_int(entry["reward"]):
        yield f"{label}.reward must be a non-negative integer"

    if "energyCost" in entry and not _is_non_negative_int(entry["energyCost"]):
        yield f"{label}.energyCost must be a non-negative integer"

    if "metadata" in entry and not isinstance(entry["metadata"], dict):
        yield f"{label}.metadata must be an object"


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _format_errors(title: str, errors: Sequence[str]) -> str:
    return title + ":\n" + "\n".join(f"- {err}" for err in errors)
