"""Platform primitives consumed by the game-mode core."""
from .base import Audience, GamePlatform, Message, PlatformError, SpotMode, Vector
from .memory import InMemoryPlatform, MarkerRecord, SimPlayer

__all__ = [
    "Audience",
    "GamePlatform",
    "InMemoryPlatform",
    "MarkerRecord",
    "Message",
    "PlatformError",
    "SimPlayer",
    "SpotMode",
    "Vector",
]
