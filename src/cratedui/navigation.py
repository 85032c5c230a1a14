"""
Navigation targets reachable from rendered rows.

Two kinds of activation exist: jumping to a container inside the app, and
opening an address or hostname in the user's browser. Browser opening is
best-effort; malformed targets and browser failures are dropped.
"""

import logging
import webbrowser
from typing import Callable, Optional
from urllib.parse import urlsplit

from .model import Tab

logger = logging.getLogger(__name__)

Opener = Callable[[str], object]


def build_url(host: str) -> Optional[str]:
    """`http://<host>` or None when that is not a usable URL."""
    if not host or any(ch.isspace() for ch in host):
        return None
    url = f"http://{host}"
    try:
        parts = urlsplit(url)
        # Accessing .port validates it
        parts.port
    except ValueError:
        return None
    if not parts.hostname:
        return None
    return url


def open_url(host: str, opener: Optional[Opener] = None) -> bool:
    """Open `http://<host>` with `opener` (the system browser by default).

    Returns False when nothing was opened.
    """
    opener = opener or webbrowser.open
    url = build_url(host)
    if url is None:
        logger.debug(f"Ignoring malformed navigation target: {host!r}")
        return False
    try:
        opener(url)
    except Exception as e:
        logger.debug(f"Browser failed to open {url}: {e}")
        return False
    return True


def go_to_container(store, container_id: str) -> None:
    """Switch to the containers section with `container_id` selected."""
    store.set_tab(Tab.CONTAINERS)
    store.select_container(container_id)
