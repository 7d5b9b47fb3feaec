"""Extension layer: plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
Plugins contribute document types and observe document lifecycle events.
INVARIANT: Plugin failures are warnings, never errors.
"""

from multipress.plugins.manager import PluginManager

__all__ = ["PluginManager"]
