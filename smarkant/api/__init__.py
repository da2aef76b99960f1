"""Hosting bindings for the smarkant skill."""
