"""Plugins shipped with multipress and registered by default."""
