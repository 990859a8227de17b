"""Core layout models and geometry (no Qt, no Pillow)."""
