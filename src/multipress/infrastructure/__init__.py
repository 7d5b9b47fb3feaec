"""Infrastructure layer: storage adapters behind the domain's storage port.

This layer depends on stdlib, SQLAlchemy, and the domain's port contract
(:mod:`multipress.domain.storage`). It must never import from services,
commands, or output.
"""
