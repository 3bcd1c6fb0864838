"""Core package initializer for TimelineMap.

Settings, logging, contracts and the error taxonomy live under this package:
    from timelinemap.core.settings import Settings, get_logger, load_settings
"""

from __future__ import annotations

__all__ = ["__doc__"]
