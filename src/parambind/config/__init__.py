"""Configuration — models, settings, discovery, and logging setup."""
