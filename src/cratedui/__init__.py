"""
cratedui - A keyboard-driven Terminal User Interface (TUI) for container runtimes.

This package renders a local Docker-compatible runtime as a set of navigable
sections (containers, networks, stats, ...) on top of Textual. All views are
pure functions over snapshots held in an observable store; a thin async
service talks to the runtime and writes new snapshots into that store.

Main Components:
  - main.py: Logging setup and entry point
  - backend.py: docker-py wrapper (BackendError on failed writes/stats)
  - service.py: Async ContainerService writing into the store
  - state.py: StateStore with subscribe/notify
  - filters.py: Container list filtering
  - views.py: Pure render functions (rows, network detail, stats panel)
  - refresh.py: Periodic refresh handle scoped to the stats panel lifetime
  - textual_app.py: Textual application shell
  - model.py: Data structures (Tab, ContainerInfo, NetworkInfo, ...)

Usage:
  python -m cratedui

Dependencies:
  - docker>=7.0.0
  - textual, rich
  - PyYAML
  - Python 3.10+
"""

import os
from pathlib import Path

__version__ = "0.1.0"


def get_log_path() -> str:
    """
    Get the log file path following XDG Base Directory spec.

    Returns XDG_DATA_HOME/cratedui/logs/cratedui.log with fallback to the
    system temp dir. Creates the directory if it doesn't exist.
    """
    xdg_data_home = os.environ.get('XDG_DATA_HOME')
    if not xdg_data_home:
        xdg_data_home = Path.home() / '.local' / 'share'
    else:
        xdg_data_home = Path(xdg_data_home)

    log_dir = xdg_data_home / 'cratedui' / 'logs'

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        return str(log_dir / 'cratedui.log')
    except (PermissionError, OSError):
        return '/tmp/cratedui.log'
