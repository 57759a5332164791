"""PlayForge player economy engine public API."""

from .app import EconomyApp
from .config import EconomyConfig, PlayForgeConfig, StorageConfig
from .domain.assets import AssetKind
from .domain.engine import EconomyEngine

__all__ = [
    "AssetKind",
    "EconomyApp",
    "EconomyConfig",
    "EconomyEngine",
    "PlayForgeConfig",
    "StorageConfig",
]
