"""Pytest fixtures for PlayForge.

Importing this module needs pytest, which ships with the ``test`` extra
(``pip install playforge[test]``).
"""

from __future__ import annotations

import pytest

from ..app import EconomyApp
from ..config import PlayForgeConfig
from ..clock import FrozenClock


@pytest.fixture()
def frozen_clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture()
def memory_app(frozen_clock: FrozenClock) -> EconomyApp:
    return EconomyApp(PlayForgeConfig(), clock=frozen_clock)


def app_fixture(clock: FrozenClock | None = None, **kwargs) -> EconomyApp:
    """Helper for ad-hoc tests where pytest is not available."""
    config = PlayForgeConfig(**kwargs)
    return EconomyApp(config, clock=clock or FrozenClock())
