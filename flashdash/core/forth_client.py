"""
ForthCRM client.

Posts lead payloads to the ForthCRM intake endpoint as
application/x-www-form-urlencoded data.
"""

from typing import Any, Dict, Optional
import time

import httpx

from flashdash.utils.logger import get_logger
from flashdash.utils.metrics import forth_request_latency

logger = get_logger(__name__)


class ForthError(Exception):
    """Any failed ForthCRM call. `detail` is what gets stored and surfaced."""

    def __init__(self, detail: Any, status_code: Optional[int] = None):
        super().__init__(str(detail))
        self.detail = detail
        self.status_code = status_code


def encode_form(payload: Dict[str, Any]) -> Dict[str, str]:
    """
    Flatten a lead payload into form fields.

    Booleans become "true"/"false", None becomes "", everything else str().
    """
    form: Dict[str, str] = {}
    for key, value in payload.items():
        if isinstance(value, bool):
            form[key] = "true" if value else "false"
        elif value is None:
            form[key] = ""
        else:
            form[key] = str(value)
    return form


def _response_body(response: httpx.Response) -> Any:
    """JSON when ForthCRM sends JSON, raw text otherwise."""
    if "json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            pass
    return response.text


class ForthClient:
    """
    Thin async wrapper around the ForthCRM lead endpoint.

    A `transport` can be injected (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def submit_lead(self, payload: Dict[str, Any]) -> Any:
        """
        POST the lead and return ForthCRM's response body.

        Raises:
            ForthError: on timeout, network failure or any non-2xx status (redirects included).
        """
        form = encode_form(payload)
        start = time.perf_counter()
        outcome = "error"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.url,
                    data=form,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
            if not response.is_success:
                detail = _response_body(response) or f"HTTP {response.status_code}"
                raise ForthError(detail, status_code=response.status_code)
            outcome = "success"
            return _response_body(response)
        except httpx.TimeoutException:
            raise ForthError(f"timeout of {self.timeout:g}s exceeded")
        except httpx.HTTPError as e:
            raise ForthError(str(e) or e.__class__.__name__)
        finally:
            forth_request_latency.labels(outcome=outcome).observe(time.perf_counter() - start)
