"""Data models and utility functions.

This package contains:
- light: LightIdentity, DiscoveryResult and LightStatus
- types: TypedDict definitions for HTTP and cache payloads
- utils: Utility functions (address parsing, kelvin/mireds, fuzzy matching)
"""
