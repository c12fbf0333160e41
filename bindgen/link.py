"""
Parsing of ``--link`` values.

A link value has the form ``[kind=]library`` where ``kind`` is one of
``static``, ``dynamic`` or ``framework``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .errors import LinkSpecError


class LinkKind(Enum):
    """How a library is linked."""
    STATIC = "static"
    DYNAMIC = "dynamic"
    FRAMEWORK = "framework"


@dataclass(frozen=True)
class LinkDirective:
    """A library to link and how to link it."""
    library: str
    kind: LinkKind = LinkKind.DYNAMIC


def parse_link(spec: str) -> LinkDirective:
    """
    Parse a ``[kind=]library`` string.

    Args:
        spec: Value of the ``--link`` option

    Returns:
        The parsed LinkDirective; kind defaults to dynamic

    Raises:
        LinkSpecError: If the kind is unknown or the value is malformed
    """
    parts = spec.split("=")

    if len(parts) == 1:
        kind_token, library = None, parts[0]
    elif len(parts) == 2:
        kind_token, library = parts
    else:
        raise LinkSpecError(f"Wrong link format: {spec}", spec)

    if not library:
        raise LinkSpecError(f"Wrong link format: {spec}", spec)

    if kind_token is None:
        return LinkDirective(library, LinkKind.DYNAMIC)

    try:
        kind = LinkKind(kind_token)
    except ValueError:
        raise LinkSpecError(f"Link type unknown: {kind_token}", kind_token) from None

    return LinkDirective(library, kind)
