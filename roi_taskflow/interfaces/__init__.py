"""
Interfaces module - UI adapters for the annotation core.

Provides adapters to connect the core drawing logic
with different UI frameworks.
"""

from .pointer_adapter import PointerCanvasAdapter

__all__ = ['PointerCanvasAdapter']
