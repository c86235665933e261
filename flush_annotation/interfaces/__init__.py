"""
Interfaces module - UI adapters for the annotation core.

Provides adapters to connect the core annotation logic
with different UI frameworks (Qt, Web, etc).
"""

from .render_adapter import RenderAdapter

__all__ = ['RenderAdapter']
