"""Version of the ink-wrapper generator (PEP 440)."""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"

__all__ = ["__version__"]
