"""LightClient class for the Elgato light HTTP API.

Each method talks to a single light; the client itself holds no per-light
state, so one instance is shared across concurrent requests.
"""

import logging

import requests

from core.config import REQUEST_TIMEOUT
from core.errors import ProtocolError, UnreachableError
from models.light import LightIdentity, LightStatus
from models.types import LightsPayload, LightState
from models.utils import MAX_KELVIN, MIN_KELVIN, clamp, kelvin_to_mireds, mireds_to_kelvin

logger = logging.getLogger(__name__)


class LightClient:
    """Issues control and status requests to Elgato lights."""

    def __init__(self, session: requests.Session | None = None,
                 timeout: float | tuple[float, float] = REQUEST_TIMEOUT):
        """Initialise LightClient.

        Args:
            session: requests session to use (a new one is created if omitted)
            timeout: Per-request timeout passed to requests
        """
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, light: LightIdentity, endpoint: str) -> str:
        host = f"[{light.address}]" if ':' in light.address else light.address
        return f"http://{host}:{light.port}/elgato{endpoint}"

    def _request(self, light: LightIdentity, method: str, endpoint: str,
                 data: dict | None = None) -> dict:
        """Make a request to a light and return the decoded JSON body."""
        url = self._url(light, endpoint)
        logger.debug("%s %s %s", method, url, data if data is not None else '')

        try:
            response = self.session.request(method, url, json=data, timeout=self.timeout)
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise UnreachableError(light, f"{light.label} is unreachable: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ProtocolError(light, f"Request to {light.label} failed: {e}") from e

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise ProtocolError(light, f"{light.label} returned HTTP {response.status_code}") from e

        try:
            result = response.json()
        except ValueError as e:
            raise ProtocolError(light, f"{light.label} returned invalid JSON") from e

        if not isinstance(result, dict):
            raise ProtocolError(light, f"{light.label} returned an unexpected response")
        return result

    def _get_state(self, light: LightIdentity) -> LightState:
        """Fetch the state of the first light reported by the device."""
        payload = self._request(light, 'GET', '/lights')
        lights = payload.get('lights')
        if not isinstance(lights, list) or not lights or not isinstance(lights[0], dict):
            raise ProtocolError(light, f"No lights found in response from {light.label}")

        state = lights[0]
        for key in ('on', 'brightness', 'temperature'):
            if not isinstance(state.get(key), int):
                raise ProtocolError(light, f"Malformed light state from {light.label}: missing '{key}'")
        return state

    def _put_state(self, light: LightIdentity, state: LightState) -> None:
        payload: LightsPayload = {'numberOfLights': 1, 'lights': [state]}
        self._request(light, 'PUT', '/lights', payload)

    def get_name(self, light: LightIdentity) -> str | None:
        """Return the light's display name from /elgato/accessory-info.

        Falls back to the product name, and to None if the light does not
        expose accessory info.
        """
        try:
            info = self._request(light, 'GET', '/accessory-info')
        except ProtocolError:
            return None
        return info.get('displayName') or info.get('productName') or None

    def get_status(self, light: LightIdentity) -> LightStatus:
        """Get power, brightness, temperature and name of a light."""
        state = self._get_state(light)
        name = self.get_name(light) or light.name
        return LightStatus(
            power=bool(state['on']),
            brightness=state['brightness'],
            temperature=mireds_to_kelvin(state['temperature']),
            name=name,
        )

    def set_power(self, light: LightIdentity, on: bool) -> None:
        self._put_state(light, {'on': 1 if on else 0})

    def turn_on(self, light: LightIdentity, brightness: int | None = None,
                temperature: int | None = None) -> None:
        """Turn a light on, optionally setting brightness (0-100) and temperature (kelvin).

        Settings left as None keep their current value on the light.
        """
        state: LightState = {'on': 1}
        if brightness is not None:
            state['brightness'] = clamp(brightness, 0, 100)
        if temperature is not None:
            state['temperature'] = kelvin_to_mireds(clamp(temperature, MIN_KELVIN, MAX_KELVIN))
        self._put_state(light, state)

    def set_brightness(self, light: LightIdentity, value: int) -> None:
        self._put_state(light, {'on': 1, 'brightness': clamp(value, 0, 100)})

    def adjust_brightness(self, light: LightIdentity, delta: int) -> int:
        """Change brightness relative to its current value.

        The light is switched on if it was off. Returns the new brightness.
        """
        state = self._get_state(light)
        new_brightness = clamp(state['brightness'] + delta, 0, 100)
        self._put_state(light, {'on': 1, 'brightness': new_brightness})
        return new_brightness

    def set_temperature(self, light: LightIdentity, kelvin: int) -> None:
        """Set colour temperature (2900-7000K), switching the light on."""
        if not MIN_KELVIN <= kelvin <= MAX_KELVIN:
            raise ValueError(f"temperature must be between {MIN_KELVIN} and {MAX_KELVIN}, got {kelvin}")
        self._put_state(light, {'on': 1, 'temperature': kelvin_to_mireds(kelvin)})
