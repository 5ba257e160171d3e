"""Core functionality for Elgato light control.

This package contains:
- client: LightClient class for the light HTTP API
- discovery: mDNS discovery of lights
- cache: Persistent cache of discovered lights
- resolver: Choosing target lights from flags, environment, cache or discovery
- dispatcher: Running a command against every target light
- config: Paths, environment variables and defaults
- errors: Exception hierarchy
"""
