from __future__ import annotations

from typing import Any, List


def unescape_pointer_segment(segment: str) -> str:
    """Unescape a single JSON Pointer segment ('~1' -> '/', '~0' -> '~')."""
    if segment is None:
        return ''
    return segment.replace('~1', '/').replace('~0', '~')


def split_pointer(pointer: str) -> List[str]:
    """Split a '#/a/b' pointer into unescaped segments."""
    if not pointer or pointer == '#':
        return []
    return [unescape_pointer_segment(p) for p in pointer[2:].split('/')]


def resolve_json_pointer(document: Any, pointer: str) -> Any:
    """Return the fragment of `document` that `pointer` points at.

    An empty pointer or '#' yields the document itself. Pointers that do not
    start with '#/' and pointers with a missing segment yield None.
    """
    if not pointer or pointer == '#':
        return document
    if not isinstance(pointer, str) or not pointer.startswith('#/'):
        return None

    current = document
    for segment in split_pointer(pointer):
        if isinstance(current, dict):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list):
            if not (segment.isascii() and segment.isdigit()) or int(segment) >= len(current):
                return None
            current = current[int(segment)]
        else:
            return None
    return current
