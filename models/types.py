"""Type definitions for Elgato Light CLI.

This module provides TypedDict definitions for the JSON payloads exchanged
with lights and stored in the discovery cache.
"""

from typing import TypedDict


class LightState(TypedDict, total=False):
    """One entry of the 'lights' array in /elgato/lights."""
    on: int
    brightness: int
    temperature: int  # Mireds


class LightsPayload(TypedDict):
    """Body of GET/PUT /elgato/lights."""
    numberOfLights: int
    lights: list[LightState]


class CachedLight(TypedDict):
    """A light as persisted in the discovery cache."""
    address: str
    port: int
    name: str | None


class CacheDocument(TypedDict):
    """Top-level structure of the discovery cache file."""
    version: int
    lights: list[CachedLight]
