"""multipress: a multi-tenant authorization graph of domains, users and documents."""

__version__ = "1.2.0"
