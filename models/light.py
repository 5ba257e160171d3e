"""Light data model.

This module defines the value types shared by discovery, caching and control:
- LightIdentity: one light, keyed by its normalised address and port
- DiscoveryResult: ordered, de-duplicated set of identities
- LightStatus: decoded state reported by a light
"""

import ipaddress
from dataclasses import dataclass, field
from typing import Iterable, Iterator

# Elgato lights serve their control API on this port
LIGHT_PORT = 9123


def normalise_address(address: str) -> str:
    """Normalise a host or IP address for comparison.

    IP literals are canonicalised (e.g. leading zeros, IPv6 compression);
    hostnames are lower-cased with any trailing dot removed.
    """
    text = address.strip()
    try:
        return str(ipaddress.ip_address(text))
    except ValueError:
        return text.lower().rstrip('.')


@dataclass(frozen=True)
class LightIdentity:
    """A light on the network.

    Equality and hashing use only the address and port; the name is
    informational and only known for discovered lights.
    """
    address: str
    port: int = LIGHT_PORT
    name: str | None = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'address', normalise_address(self.address))

    @property
    def key(self) -> str:
        return f"{self.address}:{self.port}"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Key Light (192.168.0.25)'."""
        if self.name:
            return f"{self.name} ({self.address})"
        return self.address

    def matches(self, name_filter: str) -> bool:
        """Case-insensitive substring match against the light's name."""
        if not self.name:
            return False
        return name_filter.lower() in self.name.lower()

    def to_dict(self) -> dict:
        return {'address': self.address, 'port': self.port, 'name': self.name}

    @classmethod
    def from_dict(cls, data: dict) -> 'LightIdentity':
        address = data['address']
        if not isinstance(address, str) or not address.strip():
            raise ValueError(f"Invalid light address: {address!r}")
        port = data.get('port', LIGHT_PORT)
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ValueError(f"Invalid light port: {port!r}")
        name = data.get('name')
        if name is not None and not isinstance(name, str):
            raise ValueError(f"Invalid light name: {name!r}")
        return cls(address=address, port=port, name=name)


class DiscoveryResult:
    """Ordered set of light identities from one discovery run.

    Identities are de-duplicated by key; the first one seen wins.
    """

    def __init__(self, lights: Iterable[LightIdentity] = ()):
        self._lights: dict[str, LightIdentity] = {}
        for light in lights:
            self.add(light)

    def add(self, light: LightIdentity) -> bool:
        """Add a light, returning False if its address was already present."""
        if light.key in self._lights:
            return False
        self._lights[light.key] = light
        return True

    @property
    def lights(self) -> list[LightIdentity]:
        return list(self._lights.values())

    def names(self) -> list[str]:
        return [light.name for light in self if light.name]

    def __iter__(self) -> Iterator[LightIdentity]:
        return iter(self._lights.values())

    def __len__(self) -> int:
        return len(self._lights)

    def __bool__(self) -> bool:
        return bool(self._lights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DiscoveryResult):
            return NotImplemented
        # Names are part of what was discovered, so compare them too
        return [l.to_dict() for l in self] == [l.to_dict() for l in other]

    def __repr__(self) -> str:
        return f"DiscoveryResult({self.lights!r})"

    def to_dict(self) -> dict:
        return {'lights': [light.to_dict() for light in self]}

    @classmethod
    def from_dict(cls, data: dict) -> 'DiscoveryResult':
        lights = data['lights']
        if not isinstance(lights, list):
            raise ValueError("'lights' must be a list")
        return cls(LightIdentity.from_dict(item) for item in lights)


@dataclass(frozen=True)
class LightStatus:
    """Current state of a light as reported by its HTTP API."""
    power: bool
    brightness: int
    temperature: int  # Kelvin
    name: str | None = None
