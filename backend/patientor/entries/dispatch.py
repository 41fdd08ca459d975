"""
Exhaustive per-kind dispatch.

Every table keyed by entry type goes through ``check_exhaustive`` when it is
built, so adding a member to ``EntryType`` fails at import time in every
module that has not registered a handler for it. At call time an entry whose
``type`` is not a known kind raises ``UnknownVariantError``; there is no
default branch.
"""

import logging
from typing import Any, Callable, Dict, FrozenSet, Generic, Mapping, TypeVar

from patientor.entries.models import EntryType
from patientor.exceptions import UnknownVariantError

logger = logging.getLogger(__name__)

V = TypeVar("V")
R = TypeVar("R")

KNOWN_KINDS: FrozenSet[EntryType] = frozenset(EntryType)


def check_exhaustive(table: Mapping[Any, V], name: str) -> Dict[EntryType, V]:
    """Return ``table`` keyed by ``EntryType``, covering exactly the known kinds.

    Raises:
        TypeError: a key is not an entry type, or a known kind has no entry.
    """
    checked: Dict[EntryType, V] = {}
    for key, value in table.items():
        try:
            checked[EntryType(key)] = value
        except ValueError:
            raise TypeError(f"{name}: {key!r} is not an entry type") from None

    missing = KNOWN_KINDS - checked.keys()
    if missing:
        names = ", ".join(sorted(k.value for k in missing))
        raise TypeError(f"{name}: no handler registered for {names}")
    return checked


def kind_of(value: Any) -> EntryType:
    """Narrow a discriminant to ``EntryType`` or fail loudly."""
    try:
        return EntryType(value)
    except ValueError:
        logger.error("Unknown entry type reached a dispatcher: %r", value)
        raise UnknownVariantError(value) from None


class EntryDispatcher(Generic[R]):
    """Select exactly one handler per entry, by its ``type`` discriminant.

    Usage:
        render = EntryDispatcher({
            EntryType.HEALTH_CHECK: render_health_check,
            EntryType.OCCUPATIONAL_HEALTHCARE: render_occupational,
            EntryType.HOSPITAL: render_hospital,
        }, name="render")
        lines = render(entry)
    """

    def __init__(self, handlers: Mapping[Any, Callable[[Any], R]], name: str = "dispatcher"):
        self.name = name
        self._handlers = check_exhaustive(handlers, name)

    @property
    def kinds(self) -> FrozenSet[EntryType]:
        return frozenset(self._handlers)

    def handler_for(self, kind: Any) -> Callable[[Any], R]:
        return self._handlers[kind_of(kind)]

    def __call__(self, entry: Any) -> R:
        return self.handler_for(getattr(entry, "type", None))(entry)
