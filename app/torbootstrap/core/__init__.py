"""Core machinery: settings, errors, the idempotent apply primitive and the pipeline."""
