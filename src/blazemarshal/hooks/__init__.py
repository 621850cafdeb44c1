"""
Lifecycle hooks registry for identity map types.
"""

from .dispatcher import AFTER_LOAD, AFTER_MATERIALIZE, AFTER_NEW, HookDispatcher, hooks

__all__ = ["AFTER_LOAD", "AFTER_MATERIALIZE", "AFTER_NEW", "HookDispatcher", "hooks"]
