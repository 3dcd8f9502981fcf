"""
Shape tolerance for CRM responses

RepairShopr is not consistent about envelopes: a created record may come
back as ``{"id": 1}`` or ``{"customer": {"id": 1}}``. Extraction is an
ordered list of key paths; the first path that yields a value wins.
"""
from typing import Any, Iterable, Optional, Sequence, Tuple

KeyPath = Tuple[str, ...]


def dig(data: Any, path: Sequence[str]) -> Optional[Any]:
    """Follow a key path through nested dicts, None when any hop is missing"""
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def first_present(data: Any, paths: Iterable[KeyPath]) -> Optional[Any]:
    """
    Return the value at the first key path that holds a usable value

    None and empty strings count as absent; zero and False are values.

    Args:
        data: Decoded JSON body
        paths: Key paths in priority order

    Returns:
        Extracted value or None
    """
    for path in paths:
        value = dig(data, path)
        if value is None or value == "":
            continue
        return value
    return None


CUSTOMER_ID_PATHS: Tuple[KeyPath, ...] = (("id",), ("customer", "id"))
TICKET_ID_PATHS: Tuple[KeyPath, ...] = (("id",), ("ticket", "id"))
TICKET_NUMBER_PATHS: Tuple[KeyPath, ...] = (("number",), ("ticket", "number"))
