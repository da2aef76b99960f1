"""CLI module for smarkant."""
