"""Core services: accounts, notes, preferences and image assets."""
