"""Persistent cache of discovered lights.

The cache holds the last non-empty discovery result so later invocations
can skip mDNS browsing. It has no expiry: the dispatcher clears it when a
cached light turns out to be unreachable.

A missing or corrupt cache file is treated as "no cache", never as an error.
"""

import json
import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path

from core.config import CACHE_FILE
from models.light import DiscoveryResult
from models.types import CacheDocument

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


class CacheStore:
    """Loads, saves and clears the discovery cache file."""

    def __init__(self, path: Path = CACHE_FILE):
        self.path = Path(path)

    def load(self) -> DiscoveryResult | None:
        """Load the cached discovery result.

        Returns:
            The cached DiscoveryResult, or None if there is no usable cache
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable cache %s: %s", self.path, e)
            return None

        try:
            if not isinstance(data, dict) or data.get('version') != CACHE_VERSION:
                raise ValueError(f"unsupported cache format: {type(data).__name__}")
            return DiscoveryResult.from_dict(data)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            logger.debug("Ignoring corrupt cache %s: %s", self.path, e)
            return None

    def save(self, result: DiscoveryResult) -> None:
        """Atomically replace the cache file with result.

        The document is written to a temporary file in the cache directory
        and renamed over the old file, so readers never see a partial write.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)

        document: CacheDocument = {'version': CACHE_VERSION, **result.to_dict()}
        fd, tmp_name = tempfile.mkstemp(
            prefix=f'.{self.path.name}.', suffix='.tmp', dir=self.path.parent
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        logger.debug("Cached %d light(s) to %s", len(result), self.path)

    def clear(self) -> bool:
        """Delete the cache file.

        Returns:
            True if a file was removed, False if there was nothing to remove
        """
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.debug("Cleared cache %s", self.path)
        return True

    def info(self) -> dict:
        """Get information about the current cache.

        Returns:
            Dictionary with exists, path, last_updated, count and lights
        """
        result = self.load()
        if result is None:
            return {
                'exists': False,
                'path': self.path,
                'last_updated': None,
                'count': 0,
                'lights': [],
            }

        try:
            last_updated = datetime.fromtimestamp(self.path.stat().st_mtime)
        except OSError:
            last_updated = None

        return {
            'exists': True,
            'path': self.path,
            'last_updated': last_updated,
            'count': len(result),
            'lights': result.lights,
        }
