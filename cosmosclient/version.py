"""
Version of the cosmosclient package.

The HTTP adapters send it in their User-Agent so node operators can tell
client releases apart in their access logs.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"

USER_AGENT = f"cosmosclient-py/{__version__}"

__all__ = ["__version__", "USER_AGENT"]
