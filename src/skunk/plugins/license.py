"""License key validation against the Skunk licensing endpoint."""

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from skunk.utils import http

if TYPE_CHECKING:
    from skunk.utils.config import Config

logger = logging.getLogger(__name__)


class LicenseResult(BaseModel):
    """Normalized license check result."""

    valid: bool
    remaining_activations: int | None = None
    error: str | None = None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def _error_message(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    data = body.get("data") if isinstance(body.get("data"), dict) else {}
    for candidate in (body.get("error"), body.get("message"), data.get("error"), data.get("message")):
        if isinstance(candidate, str) and candidate:
            return candidate
    return None


def parse_license_response(body: Any) -> LicenseResult:
    """
    Normalize a license server response.

    Two response shapes are in circulation:

    - ``{"data": {"valid": true, "max_sites": 3, "activations": 1}}``
    - ``{"success": true, "data": {"timesActivated": 1, "timesActivatedMax": 3}}``

    Anything else is treated as invalid.
    """
    if not isinstance(body, dict):
        return LicenseResult(valid=False, error="Invalid response from license server")

    data = body.get("data")
    if not isinstance(data, dict):
        data = {}
    message = _error_message(body)

    if "valid" in data:
        valid = data.get("valid") is True
        max_sites = _as_int(data.get("max_sites"))
        activations = _as_int(data.get("activations"))
    elif "timesActivatedMax" in data:
        valid = body.get("success") is True
        max_sites = _as_int(data.get("timesActivatedMax"))
        activations = _as_int(data.get("timesActivated"))
    else:
        return LicenseResult(
            valid=False, error=message or "Unrecognized response from license server"
        )

    remaining = None
    if max_sites is not None:
        remaining = max(max_sites - (activations or 0), 0)

    return LicenseResult(
        valid=valid,
        remaining_activations=remaining,
        error=None if valid else (message or "License key is not valid"),
    )


class LicenseValidator:
    """Check license keys with a single request; never raises."""

    @staticmethod
    def from_config(
        config: "Config", transport: httpx.AsyncBaseTransport | None = None
    ) -> "LicenseValidator":
        return LicenseValidator(
            api_base=config.api_base,
            timeout=config.request_timeout,
            transport=transport,
        )

    def __init__(
        self,
        api_base: str = "https://skunkglobal.com/api",
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = f"{api_base}/license/validate"
        self.timeout = timeout
        self._transport = transport

    async def validate(self, key: str, product: str) -> LicenseResult:
        """Validate a license key for a product slug.

        Args:
            key: License key supplied by the user
            product: Plugin slug the key should unlock

        Returns:
            LicenseResult; connection and parse failures map to valid=False
        """
        try:
            async with http.create_client(self.timeout, self._transport) as client:
                response = await client.post(
                    self.url, json={"license_key": key, "product": product}
                )
        except httpx.HTTPError as e:
            logger.warning(f"License check failed for {product}: {e}")
            return LicenseResult(
                valid=False, error=f"Could not reach license server: {e}"
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"License server returned non-JSON ({response.status_code})")
            if not response.is_success:
                return LicenseResult(valid=False, error=f"HTTP {response.status_code}")
            return LicenseResult(valid=False, error="Invalid response from license server")

        if response.is_success:
            result = parse_license_response(body)
        else:
            message = _error_message(body)
            result = LicenseResult(
                valid=False, error=message or f"HTTP {response.status_code}"
            )

        logger.info(f"License check for {product}: valid={result.valid}")
        return result
