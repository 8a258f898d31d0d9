"""Fanbase source package.

This package contains:
- config: Configuration loading and management
- fanbase: Creator accounts, launch tokens, issued tokens and the marketplace
"""

from __future__ import annotations

__all__: list[str] = []
