"""Tests for the discovery cache in core/cache.py

These tests use real files under pytest's tmp_path; the user's cache
directory is never touched.
"""

import json
import os
from datetime import datetime
from unittest.mock import patch

import pytest

from core.cache import CACHE_VERSION, CacheStore
from models.light import DiscoveryResult, LightIdentity


class TestSaveAndLoad:
    """Test cache persistence."""

    def test_round_trip(self, cache_store, two_lights):
        """Saved result should load back identically, names included."""
        cache_store.save(two_lights)

        loaded = cache_store.load()

        assert loaded == two_lights
        assert [l.name for l in loaded] == ['Key Light Left', 'Key Light Right']

    def test_round_trip_empty_result(self, cache_store):
        """An empty result should also round-trip."""
        cache_store.save(DiscoveryResult())

        loaded = cache_store.load()

        assert loaded is not None
        assert len(loaded) == 0

    def test_round_trip_keeps_port_and_missing_name(self, cache_store):
        result = DiscoveryResult([LightIdentity('elgato.local', port=9124)])
        cache_store.save(result)

        loaded = cache_store.load()

        assert loaded.lights[0].port == 9124
        assert loaded.lights[0].name is None

    def test_save_creates_parent_directory(self, tmp_path, two_lights):
        store = CacheStore(tmp_path / 'a' / 'b' / 'lights.json')

        store.save(two_lights)

        assert store.path.exists()

    def test_save_overwrites_previous_result(self, cache_store, two_lights, light_a):
        cache_store.save(two_lights)
        cache_store.save(DiscoveryResult([light_a]))

        assert cache_store.load().lights == [light_a]

    def test_save_writes_versioned_json(self, cache_store, light_a):
        cache_store.save(DiscoveryResult([light_a]))

        data = json.loads(cache_store.path.read_text())

        assert data['version'] == CACHE_VERSION
        assert data['lights'] == [{'address': '10.0.0.1', 'port': 9123, 'name': 'Key Light Left'}]

    def test_save_leaves_no_temp_files(self, cache_store, two_lights):
        cache_store.save(two_lights)

        assert os.listdir(cache_store.path.parent) == ['lights.json']

    def test_failed_save_keeps_previous_cache(self, cache_store, two_lights, light_a):
        """A save interrupted before the rename must not corrupt the cache."""
        cache_store.save(two_lights)

        with patch('core.cache.os.replace', side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                cache_store.save(DiscoveryResult([light_a]))

        assert cache_store.load() == two_lights
        assert os.listdir(cache_store.path.parent) == ['lights.json']


class TestLoadMissingOrCorrupt:
    """Missing or corrupt caches behave as absent."""

    def test_missing_file(self, cache_store):
        assert cache_store.load() is None

    @pytest.mark.parametrize('content', [
        '',
        'not json',
        '{"version": 1, "lights": [',
        '[]',
        '{"lights": []}',
        '{"version": 99, "lights": []}',
        '{"version": 1}',
        '{"version": 1, "lights": {}}',
        '{"version": 1, "lights": [{"name": "no address"}]}',
        '{"version": 1, "lights": [{"address": ""}]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": "x"}]}',
        '{"version": 1, "lights": ["10.0.0.1"]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": Infinity, "name": "A"}]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": 9123.5}]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": 0}]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": 70000}]}',
        '{"version": 1, "lights": [{"address": "10.0.0.1", "port": true}]}',
    ])
    def test_corrupt_content(self, cache_store, content):
        cache_store.path.parent.mkdir(parents=True)
        cache_store.path.write_text(content)

        assert cache_store.load() is None

    def test_binary_garbage(self, cache_store):
        cache_store.path.parent.mkdir(parents=True)
        cache_store.path.write_bytes(b'\xff\xfe\x00garbage')

        assert cache_store.load() is None


class TestClear:
    """Test cache invalidation."""

    def test_clear_then_load(self, cache_store, two_lights):
        cache_store.save(two_lights)

        assert cache_store.clear() is True
        assert cache_store.load() is None

    def test_clear_is_idempotent(self, cache_store, two_lights):
        cache_store.save(two_lights)

        assert cache_store.clear() is True
        assert cache_store.clear() is False
        assert cache_store.load() is None

    def test_clear_without_cache(self, cache_store):
        assert cache_store.clear() is False


class TestInfo:
    """Test cache information for cache-info."""

    def test_info_without_cache(self, cache_store):
        info = cache_store.info()

        assert info['exists'] is False
        assert info['count'] == 0
        assert info['path'] == cache_store.path

    def test_info_with_cache(self, cache_store, two_lights):
        cache_store.save(two_lights)

        info = cache_store.info()

        assert info['exists'] is True
        assert info['count'] == 2
        assert isinstance(info['last_updated'], datetime)
        assert info['lights'] == two_lights.lights
