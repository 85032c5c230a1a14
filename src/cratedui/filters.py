"""Container list filtering."""

from typing import List, Sequence

from .model import ContainerInfo


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def filter_containers(containers: Sequence[ContainerInfo], only_running: bool = False,
                      search_text: str = "") -> List[ContainerInfo]:
    """
    Visible subset of `containers`, in source order.

    `only_running` keeps containers whose status is "running" (any case);
    a non-empty `search_text` keeps containers whose id or status contains it,
    ignoring case. Both apply together. The input is never modified.
    """
    res = []
    for c in containers:
        if only_running and not c.is_running:
            continue
        if search_text and not (_contains(c.id, search_text) or _contains(c.status, search_text)):
            continue
        res.append(c)
    return res
