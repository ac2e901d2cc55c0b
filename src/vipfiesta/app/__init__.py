"""Settings and HTTP surface for the game mode."""
