"""Domain layer — kinds, conversion, validators, and field plans.

This layer depends only on the standard library.
It must never import from the binder, services, commands, or config.
"""
