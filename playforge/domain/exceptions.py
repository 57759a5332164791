"""Exceptions raised by PlayForge domain services."""


class PlayForgeError(RuntimeError):
    """Base class for domain exceptions."""


class PlayerNotFound(PlayForgeError):
    """Raised when the target player record does not exist."""

    def __init__(self, player_id: str) -> None:
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


class PlayerAlreadyExists(PlayForgeError):
    """Raised when a player record is initialized twice."""


class InsufficientFunds(PlayForgeError):
    """Raised when the balance cannot cover a purchase or refill."""


class InsufficientAsset(PlayForgeError):
    """Raised when a boost is activated without a matching asset."""


class LevelNotFound(PlayForgeError):
    """Raised when level content is missing for the requested level."""


class InvalidLevelTransition(PlayForgeError):
    """Raised when a level is completed out of order."""
