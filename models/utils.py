"""Utility functions for Elgato light control.

This module contains helper functions used across the application:
- parse_address / parse_address_list: Turn user input into LightIdentity objects
- kelvin_to_mireds / mireds_to_kelvin: Colour temperature conversion
- clamp: Bound a value to a range
- filter_by_name: Case-insensitive name matching for --light
- similarity_score: Fuzzy name scoring for suggestions
- find_similar_strings: Best-scoring distinct names
"""

from typing import Iterable

from models.light import LIGHT_PORT, LightIdentity

# Temperature range accepted by Elgato lights
MIN_KELVIN = 2900
MAX_KELVIN = 7000


def parse_address(text: str) -> LightIdentity:
    """Parse 'host', 'host:port' or '[ipv6]:port' into a LightIdentity.

    Raises:
        ValueError: If the address is empty or the port is invalid
    """
    text = text.strip()
    if not text:
        raise ValueError("empty address")

    host, port = text, LIGHT_PORT
    if text.startswith('['):
        # [fe80::1]:9123
        end = text.find(']')
        if end == -1:
            raise ValueError(f"unterminated IPv6 address: {text}")
        host = text[1:end]
        rest = text[end + 1:]
        if rest:
            if not rest.startswith(':'):
                raise ValueError(f"invalid address: {text}")
            port = _parse_port(rest[1:], text)
    elif text.count(':') == 1:
        host, port_text = text.split(':')
        port = _parse_port(port_text, text)

    if not host:
        raise ValueError(f"invalid address: {text}")
    return LightIdentity(address=host, port=port)


def _parse_port(port_text: str, original: str) -> int:
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"invalid port in address: {original}") from None
    if not 0 < port < 65536:
        raise ValueError(f"port out of range in address: {original}")
    return port


def parse_address_list(values: str | Iterable[str] | None) -> list[LightIdentity]:
    """Parse comma-separated address lists, dropping blanks and duplicates.

    Accepts a single string (as found in ELGATO_LIGHT_IP) or an iterable of
    strings (as collected from a repeatable --ip-address option), where each
    string may itself contain several comma-separated addresses.
    """
    if not values:
        return []
    if isinstance(values, str):
        values = [values]

    lights = []
    seen = set()
    for value in values:
        for part in value.split(','):
            if not part.strip():
                continue
            light = parse_address(part)
            if light.key not in seen:
                seen.add(light.key)
                lights.append(light)
    return lights


def kelvin_to_mireds(kelvin: int) -> int:
    """Convert a colour temperature in kelvin to mireds."""
    return 1_000_000 // kelvin


def mireds_to_kelvin(mireds: int) -> int:
    """Convert mireds to kelvin. Returns 0 for a zero reading."""
    if not mireds:
        return 0
    return 1_000_000 // mireds


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def filter_by_name(lights: Iterable[LightIdentity], name_filter: str) -> list[LightIdentity]:
    """Keep lights whose name contains name_filter (case-insensitive)."""
    return [light for light in lights if light.matches(name_filter)]


def _in_order_matches(needle: str, haystack: str) -> int:
    """Count characters of needle found in haystack in order, stopping at the first miss."""
    remaining = iter(haystack)
    return sum(1 for char in needle if char in remaining)


def similarity_score(s1: str, s2: str) -> int:
    """Score how alike two names are, ignoring case.

    Used for command typo suggestions and --light name suggestions.

    Returns:
        100 for equal names, 80 when one is a prefix of the other, 60 when
        one contains the other, otherwise up to 50 in proportion to the
        characters matched in order (scores of 20 or less count as 0)
    """
    a, b = s1.lower(), s2.lower()
    if a == b:
        return 100
    if a.startswith(b) or b.startswith(a):
        return 80
    if a in b or b in a:
        return 60

    score = int(_in_order_matches(a, b) / max(len(a), len(b)) * 50)
    return score if score > 20 else 0


def find_similar_strings(target: str, candidates: Iterable[str], limit: int = 5) -> list[str]:
    """Return up to limit distinct candidates resembling target, best first.

    Equal scores keep the order of candidates.
    """
    scores = {}
    for candidate in candidates:
        if candidate not in scores:
            scores[candidate] = similarity_score(target, candidate)
    ranked = sorted((c for c, score in scores.items() if score > 0), key=lambda c: -scores[c])
    return ranked[:limit]
