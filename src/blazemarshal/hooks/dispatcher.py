"""
Hook dispatcher coordinating identity map lifecycle events.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional


HookHandler = Callable[..., None]

AFTER_LOAD = "after_load"
AFTER_MATERIALIZE = "after_materialize"
AFTER_NEW = "after_new"


class HookDispatcher:
    """
    Maintains global and per-type hook handlers.
    """

    def __init__(self) -> None:
        self._global_handlers: Dict[str, List[HookHandler]] = defaultdict(list)
        self._type_handlers: Dict[str, Dict[str, List[HookHandler]]] = defaultdict(
            lambda: defaultdict(list)
        )

    def register(self, event: str, handler: HookHandler, *, type_name: Optional[str] = None) -> None:
        if type_name:
            self._type_handlers[type_name][event].append(handler)
        else:
            self._global_handlers[event].append(handler)

    def fire(self, event: str, entity: Any, *, type_name: Optional[str] = None, **context: Any) -> None:
        handlers = list(self._global_handlers.get(event, []))
        if type_name:
            handlers.extend(self._type_handlers.get(type_name, {}).get(event, []))
        for handler in handlers:
            handler(entity, **context)

    def clear(self) -> None:
        self._global_handlers.clear()
        self._type_handlers.clear()


hooks = HookDispatcher()
