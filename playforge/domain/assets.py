"""Consumable asset kinds and their prices."""

from __future__ import annotations

from enum import Enum
from typing import Mapping


class AssetKind(str, Enum):
    SHOW_AVAILABLE_MOVES = "showAvailableMoves"
    AI_ASSISTANT = "aiAssistant"


DEFAULT_ASSET_COSTS: Mapping[str, int] = {
    AssetKind.SHOW_AVAILABLE_MOVES.value: 30,
    AssetKind.AI_ASSISTANT.value: 50,
}


def resolve_asset(kind: AssetKind | str) -> AssetKind:
    try:
        return AssetKind(kind)
    except ValueError as exc:
        raise ValueError(f"Unknown asset kind {kind!r}") from exc


def empty_assets() -> dict[str, int]:
    return {kind.value: 0 for kind in AssetKind}


def asset_cost(costs: Mapping[str, int], kind: AssetKind) -> int:
    try:
        return costs[kind.value]
    except KeyError as exc:
        raise KeyError(f"No price configured for asset {kind.value}") from exc
