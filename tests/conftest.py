"""Pytest configuration and fixtures for Elgato light tests."""

import pytest
from pathlib import Path

from core.cache import CacheStore
from models.light import DiscoveryResult, LightIdentity


class InMemoryCacheStore:
    """Cache store that keeps the result in memory and counts calls."""

    def __init__(self, result: DiscoveryResult | None = None):
        self.result = result
        self.load_calls = 0
        self.save_calls = 0
        self.clear_calls = 0

    def load(self):
        self.load_calls += 1
        return self.result

    def save(self, result):
        self.save_calls += 1
        self.result = result

    def clear(self):
        self.clear_calls += 1
        existed = self.result is not None
        self.result = None
        return existed

    @property
    def path(self):
        return Path('/nonexistent/lights.json')

    def info(self):
        return {
            'exists': self.result is not None,
            'path': self.path,
            'last_updated': None,
            'count': len(self.result) if self.result else 0,
            'lights': self.result.lights if self.result else [],
        }


class FakeDiscovery:
    """Discovery stand-in returning a fixed result and recording timeouts."""

    def __init__(self, result: DiscoveryResult | None = None, error: Exception | None = None):
        self.result = result if result is not None else DiscoveryResult()
        self.error = error
        self.calls = []

    def discover(self, timeout):
        self.calls.append(timeout)
        if self.error:
            raise self.error
        return DiscoveryResult(self.result)


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def light_a():
    return LightIdentity('10.0.0.1', name='Key Light Left')


@pytest.fixture
def light_b():
    return LightIdentity('10.0.0.2', name='Key Light Right')


@pytest.fixture
def two_lights(light_a, light_b):
    return DiscoveryResult([light_a, light_b])


@pytest.fixture
def memory_cache():
    return InMemoryCacheStore()


@pytest.fixture
def fake_discovery():
    return FakeDiscovery()


@pytest.fixture
def cache_store(tmp_path):
    """A real CacheStore writing under pytest's tmp_path."""
    return CacheStore(tmp_path / 'cache' / 'lights.json')
