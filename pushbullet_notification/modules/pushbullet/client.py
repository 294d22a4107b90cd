"""
Pushbullet delivery client.

One synchronous POST per dispatch, classified into a DeliveryStatus:

    200           -> SENT
    >= 500        -> RETRYABLE_ERROR
    anything else -> FATAL

Connect failures and timeouts are RETRYABLE_ERROR unless
pushbullet_retry_transport_errors is off. No retry happens here; the host
re-runs the pipeline on its next save.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from pydantic import ValidationError

from pushbullet_notification.core.base import DeliveryStatus
from pushbullet_notification.core.config import settings
from pushbullet_notification.modules.pushbullet.errors import (
    ProviderRejected,
    ProviderUnavailable,
    PushbulletError,
    TransportError,
)
from pushbullet_notification.modules.pushbullet.schemas import PushbulletErrorBody, PushLink

log = logging.getLogger("pushbullet.client")


@dataclass(frozen=True)
class DispatchRequest:
    """Everything one attempt needs. Lives for a single send()."""
    headline: str
    url: str
    email: str
    credential: str

    def __repr__(self):
        # Keep the token out of logs and tracebacks.
        return f"DispatchRequest(headline={self.headline!r}, url={self.url!r}, email={self.email!r})"


def classify_status(status_code: Optional[int]) -> DeliveryStatus:
    if status_code == 200:
        return DeliveryStatus.SENT
    if isinstance(status_code, int) and status_code >= 500:
        return DeliveryStatus.RETRYABLE_ERROR
    return DeliveryStatus.FATAL


def _error_detail(response: httpx.Response) -> Optional[str]:
    """Pull the provider's error message out of the response, if there is one."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] or None
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return None
    try:
        error = PushbulletErrorBody.model_validate(body["error"])
    except ValidationError:
        return None
    return error.message


class PushbulletClient:
    def __init__(
        self,
        api_url: str = None,
        timeout: float = None,
        retry_transport_errors: bool = None,
        http_client: httpx.Client = None,
    ):
        self.api_url = api_url or settings.pushbullet_api_url
        self.retry_transport_errors = (
            settings.pushbullet_retry_transport_errors
            if retry_transport_errors is None else retry_transport_errors
        )
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            timeout=settings.pushbullet_timeout if timeout is None else timeout
        )

    def close(self):
        if self._owns_client:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def send(self, request: DispatchRequest) -> DeliveryStatus:
        """Deliver one link push and return its classification. Never raises."""
        try:
            self._post(request)
        except PushbulletError as e:
            log.warning(f"Push for {request.url} not delivered ({e.status.name}): {e}")
            return e.status
        log.debug(f"Push sent for {request.url}")
        return DeliveryStatus.SENT

    def _post(self, request: DispatchRequest) -> None:
        payload = PushLink(body=request.headline, url=request.url, email=request.email)
        try:
            response = self._http.post(
                self.api_url,
                content=payload.model_dump_json(),
                headers={
                    "Access-Token": request.credential,
                    "Content-Type": "application/json",
                },
            )
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise TransportError(
                f"Pushbullet unreachable: {type(e).__name__}",
                retryable=self.retry_transport_errors,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Pushbullet request failed: {type(e).__name__}") from e

        status = classify_status(response.status_code)
        if status is DeliveryStatus.SENT:
            return
        detail = _error_detail(response)
        if status is DeliveryStatus.RETRYABLE_ERROR:
            raise ProviderUnavailable(response.status_code, detail)
        raise ProviderRejected(response.status_code, detail)
