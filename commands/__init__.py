"""CLI command modules.

This package contains:
- group: Coloured Click group with typo suggestions
- context: Shared CLI state and per-light result reporting
- control: Light commands (on, off, brightness, temperature, status)
- discovery: Network discovery command (discover)
- cache: Cache management commands (clear-cache, cache-info)
"""
