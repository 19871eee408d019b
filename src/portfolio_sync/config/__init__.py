"""Configuration models, constants and on-disk manager."""
