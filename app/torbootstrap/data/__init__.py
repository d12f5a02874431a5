"""Bundled data files: color theme and per-mode configuration templates."""
