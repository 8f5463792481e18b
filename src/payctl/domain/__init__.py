"""Domain layer — instruction grammar, business rules, and settlement.

This layer depends only on stdlib and pydantic.
It must never import from services, commands, output, or config.
"""
