"""
Get-or-create navigation over the generic configuration tree.

Every cached namespace is a nested mapping of strings. The helpers in this
module are the only place where child nodes are created, so the creation
rules hold at every level of the tree:
- an existing child is always returned untouched
- a missing child is inserted only when a factory is supplied
- an existing non-empty scalar is never replaced by a container
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Callable, Dict, Optional, Tuple

from .constants import ISCSIConstants

logger = logging.getLogger(__name__)

Factory = Callable[[], Any]


def empty_container() -> Dict[str, Any]:
    """Factory for an empty mapping node."""
    return {}


def empty_portal() -> Dict[str, Any]:
    """Factory for a portal entry with its fixed sub-keys set to placeholders."""
    return {key: ISCSIConstants.EMPTY_VALUE for key in ISCSIConstants.PORTAL_SUBKEYS}


def get_or_insert(container: MutableMapping, key: str, factory: Factory) -> Tuple[Any, bool]:
    """Return ``container[key]``, inserting ``factory()`` first if it is missing.

    Args:
        container: Mapping to look in
        key: Child key
        factory: Zero-argument callable building the new child

    Returns:
        Tuple of (child, inserted) where inserted is True only if the child
        was created by this call
    """
    if key in container:
        return container[key], False
    child = factory()
    container[key] = child
    return child, True


def resolve(container: Optional[MutableMapping], key: str,
            factory: Optional[Factory] = None) -> Tuple[Optional[MutableMapping], bool]:
    """Resolve a container child for navigation, creating it if allowed.

    A missing container, a missing key without a factory, or a key holding
    a non-empty scalar all resolve to None. An empty placeholder scalar is
    treated like a missing key, since replacing it loses nothing.

    Returns:
        Tuple of (child mapping or None, inserted)
    """
    if container is None:
        return None, False

    child = container.get(key)
    if isinstance(child, MutableMapping):
        return child, False

    if child is not None and child != ISCSIConstants.EMPTY_VALUE:
        logger.warning("Refusing to navigate through scalar value at '%s'", key)
        return None, False

    if factory is None:
        return None, False

    if child is not None:
        # Empty placeholder, replace it with the container
        del container[key]
    return get_or_insert(container, key, factory)
