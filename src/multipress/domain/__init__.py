"""Domain layer: entities, permission rules, and the resolution context.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
