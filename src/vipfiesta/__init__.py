"""VIP Fiesta, a team VIP elimination game-mode controller."""

__version__ = "0.1.0"
