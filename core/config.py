"""Configuration constants and environment handling.

This module handles:
- Cache file location (per-user, platform-appropriate cache directory)
- Environment variable names and defaults for the CLI
- Timeouts and defaults for light commands
"""

import os
import sys
from pathlib import Path

APP_NAME = 'elgato-light'

# Environment variables
ENV_IP_ADDRESS = 'ELGATO_LIGHT_IP'
ENV_TIMEOUT = 'ELGATO_LIGHT_TIMEOUT'
ENV_DISCOVERY = 'ELGATO_LIGHT_DISCOVERY'

# mDNS service advertised by Elgato lights
SERVICE_TYPE = '_elg._tcp.local.'

# Seconds to browse for lights before giving up
DEFAULT_DISCOVERY_TIMEOUT = 10.0

# Per-request HTTP timeout (connect, read) in seconds
REQUEST_TIMEOUT = (2.0, 5.0)


def user_cache_dir(platform: str | None = None, environ: dict | None = None) -> Path:
    """Return the per-user cache directory for this application.

    Args:
        platform: Override for sys.platform (used by tests)
        environ: Override for os.environ (used by tests)
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform == 'darwin':
        return Path.home() / 'Library' / 'Caches' / APP_NAME
    if platform.startswith('win'):
        base = environ.get('LOCALAPPDATA')
        root = Path(base) if base else Path.home() / 'AppData' / 'Local'
        return root / APP_NAME / 'Cache'

    base = environ.get('XDG_CACHE_HOME')
    root = Path(base) if base and Path(base).is_absolute() else Path.home() / '.cache'
    return root / APP_NAME


CACHE_FILE = user_cache_dir() / 'lights.json'


def discovery_enabled(environ: dict | None = None) -> bool:
    """Whether ELGATO_LIGHT_DISCOVERY allows auto-discovery (default yes)."""
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_DISCOVERY, '').strip().lower()
    return value not in ('0', 'false', 'no', 'off')
