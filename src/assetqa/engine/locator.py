"""LocatorResolver — LocatorSpec to live element handles.

Pure query: resolving never taps, scrolls or waits. Zero matches is a valid
answer; only a malformed spec is an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from assetqa.core.exceptions import InvalidLocator
from assetqa.core.models import LocatorKind, LocatorSpec

if TYPE_CHECKING:
    from assetqa.engine.base import BaseElement, BaseSession

logger = logging.getLogger(__name__)

_KINDS = frozenset(kind.value for kind in LocatorKind)


def validate(spec: LocatorSpec) -> None:
    """Raise InvalidLocator if spec has an unsupported kind or empty value."""
    if spec.kind not in _KINDS:
        msg = f"Unsupported locator kind: {spec.kind!r} (expected one of {sorted(_KINDS)})"
        raise InvalidLocator(msg)
    if not spec.value or not spec.value.strip():
        msg = f"Locator value must not be empty ({spec.kind})"
        raise InvalidLocator(msg)


def quote_predicate(value: str) -> str:
    """Quote a literal for an NSPredicate string."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def label_predicate(label: str, element_type: str | None = None) -> LocatorSpec:
    """Structural predicate: element type + exact label (or name)."""
    quoted = quote_predicate(label)
    expr = f"(label == {quoted} OR name == {quoted})"
    if element_type:
        expr = f"type == {quote_predicate(element_type)} AND {expr}"
    return LocatorSpec.predicate(expr)


class LocatorResolver:
    """Resolve LocatorSpecs against a borrowed session."""

    def __init__(self, session: BaseSession) -> None:
        self._session = session

    def resolve(self, spec: LocatorSpec) -> list[BaseElement]:
        """Return matching elements in tree order (possibly empty).

        Raises:
            InvalidLocator: If spec is malformed.
        """
        validate(spec)
        elements = self._session.find_elements(spec)
        if spec.visible_only:
            elements = [el for el in elements if el.is_displayed()]
        logger.debug("resolve %s -> %d element(s)", spec.describe(), len(elements))
        return elements

    def first(self, spec: LocatorSpec) -> BaseElement | None:
        """First match or None."""
        elements = self.resolve(spec)
        return elements[0] if elements else None

    def exists(self, spec: LocatorSpec) -> bool:
        return bool(self.resolve(spec))

