from typing import Any, Dict, Optional
import json

try:
    import httpx
except ModuleNotFoundError as exc:  # pragma: no cover - user environment dependency
    raise ModuleNotFoundError(
        "Missing dependency 'httpx'. Install with: pip install httpx"
    ) from exc

from endpoints import BASE_URL
from .errors import ApiError, AuthExpired
from .utils import append_log_line, get_logger, redact_payload, redacted_headers, truncate_text


def server_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("message", "msg", "error"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return None


class CloudClient:
    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        http_log_path: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = get_logger('fscloud')
        self._client = httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=transport)
        self.http_log_path = http_log_path

    def _log_line(self, line: str) -> None:
        if self.http_log_path:
            append_log_line(self.http_log_path, line)

    def request(self, method: str, path: str, token: Optional[str] = None, **kwargs: Any) -> httpx.Response:
        url = path if path.startswith('http') else f"{self.base_url}{path}"
        headers: Dict[str, str] = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        headers.update(kwargs.get('headers', {}) or {})
        kwargs['headers'] = headers
        redacted = redacted_headers(headers)
        payload = None
        if "json" in kwargs:
            payload = redact_payload(kwargs.get("json"))
        elif "data" in kwargs:
            payload = redact_payload(kwargs.get("data"))
        self.logger.debug('HTTP %s %s headers=%s', method, url, redacted)
        if payload is not None:
            self._log_line(f"{method} {url} headers={redacted} payload={payload}")
        else:
            self._log_line(f"{method} {url} headers={redacted}")

        try:
            resp = self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            self.logger.debug('HTTP %s %s transport error: %s', method, url, exc)
            self._log_line(f"{method} {url} error={exc!r}")
            raise ApiError(None, detail=str(exc)) from exc

        response_body: Any = None
        try:
            response_body = redact_payload(resp.json())
        except ValueError:
            response_body = truncate_text(resp.text or "")
        self._log_line(
            f"{method} {url} status={resp.status_code} response={json.dumps(response_body, ensure_ascii=True)}",
        )

        if resp.status_code == 401:
            raise AuthExpired(server_message(resp))
        if resp.is_error:
            raise ApiError(resp.status_code, server_message(resp), detail=truncate_text(resp.text or "", 200))
        return resp

    def close(self) -> None:
        self._client.close()
