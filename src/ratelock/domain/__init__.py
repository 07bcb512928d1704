"""Domain layer — actions, key events, and rate arithmetic.

This layer depends only on stdlib and pydantic.
It must never import from guard, dispatch, infrastructure, commands, or config.
"""
