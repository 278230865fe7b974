"""
Exception hierarchy for colflow.

    ColflowError (base)
    ├── ConfigurationError   # caller contract violations (columns, styles, colors)
    ├── AssetError           # images that cannot be read or sized
    └── LayoutError          # layout cannot continue (no page can be emitted)

A vetoed page break is not an error; see ``HookResult`` in ``colflow.models``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ColflowError(Exception):
    """
    Base exception for all colflow errors.

    Attributes:
        message: Human-readable error description.
        context: Additional context data for debugging.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(ColflowError, ValueError):
    """Invalid column table, style string, color or recipe."""


class AssetError(ColflowError):
    """An image could not be read, or has no usable aspect ratio."""

    def __init__(self, message: str, path: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        context = dict(context or {})
        if path:
            context["path"] = path
        super().__init__(message, context)
        self.path = path


class LayoutError(ColflowError):
    """The layout cannot advance, e.g. the surface can no longer emit pages."""
