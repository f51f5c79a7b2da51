"""Payment API HTTP client that reports every failure as an error-shaped response"""

import httpx
from typing import Any, Dict, List, Tuple
from customer_sync.config import settings
from customer_sync.domain.models import RemoteResponse
from customer_sync.infrastructure.observability.metrics import record_remote_request, remote_latency_histogram


def encode_form(payload: Dict[str, Any], prefix: str = "") -> List[Tuple[str, str]]:
    """
    Flatten a payload into form fields using bracket notation.

    {"metadata": {"plan": "gold"}} -> [("metadata[plan]", "gold")]
    Empty maps and None values are dropped.
    """
    fields: List[Tuple[str, str]] = []
    for key, value in payload.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            fields.extend(encode_form(value, name))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                if isinstance(item, dict):
                    fields.extend(encode_form(item, f"{name}[{index}]"))
                else:
                    fields.append((f"{name}[{index}]", _scalar(item)))
        else:
            fields.append((name, _scalar(value)))
    return fields


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _error(message: str) -> RemoteResponse:
    return {"error": {"message": message}}


class StripeClient:
    """Synchronous client for the remote payment API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.remote_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def request(self, payload: Dict[str, Any], path: str, method: str = "POST") -> RemoteResponse:
        """
        Call the payment API and return its JSON body.

        Never raises: timeouts, transport failures, non-JSON bodies and error
        statuses all come back as {"error": {"message": ...}}.
        """
        method = method.upper()
        fields = encode_form(payload or {})
        url = f"{self.base_url}/{path.lstrip('/')}"

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            try:
                with remote_latency_histogram.time():
                    if method == "POST":
                        response = client.post(url, data=dict(fields))
                    else:
                        response = client.request(method, url, params=fields)
                data = response.json()
            except httpx.TimeoutException:
                record_remote_request(method, ok=False)
                return _error(f"Payment API timeout after {self.timeout}s")
            except httpx.RequestError as e:
                record_remote_request(method, ok=False)
                return _error(f"Payment API unavailable: {e}")
            except ValueError:
                record_remote_request(method, ok=False)
                return _error(f"Invalid response from payment API: {response.status_code}")

        if not isinstance(data, dict):
            record_remote_request(method, ok=False)
            return _error("Invalid response from payment API")

        if response.is_error and not data.get("error"):
            data = _error(f"Payment API error: {response.status_code}")

        record_remote_request(method, ok=not data.get("error"))
        return data
