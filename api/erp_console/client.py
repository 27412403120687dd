# erp_console/client.py
"""
HTTP client for the ERP backend.

- Bearer token + CSRF header from the SessionStore on every request
- 401 -> one refresh-token round trip, then the original request is replayed
- refresh failure clears the session, calls on_session_expired (the console
  drops its query cache) and raises AuthenticationRequired
- non-2xx replies are unwrapped into ErpApiError with the backend's message
"""
from __future__ import annotations

import logging
import re
import threading
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

import httpx

from .errors import (
    AuthenticationRequired,
    ErpApiError,
    CONNECTION_MESSAGE,
    error_from_response,
)
from .session import SessionStore

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh-token"

# credential endpoints answer 401 for bad input, not for an expired token
NO_REFRESH_PATHS = (
    REFRESH_PATH,
    "/auth/login",
    "/auth/verify-otp",
    "/auth/resend-otp",
    "/auth/forgot-password",
    "/auth/reset-password",
)

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


def clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop None/empty values; booleans go out as true/false like a browser would send them."""
    out: Dict[str, Any] = {}
    for k, v in (params or {}).items():
        if v is None or v == "":
            continue
        if isinstance(v, bool):
            out[k] = "true" if v else "false"
        elif isinstance(v, (list, tuple, set)):
            vals = [("true" if x else "false") if isinstance(x, bool) else x for x in v if x is not None]
            if vals:
                out[k] = vals
        else:
            out[k] = v
    return out


class ErpClient:
    def __init__(
        self,
        base_url: str,
        session: SessionStore,
        timeout: float = 30.0,
        verify: bool = True,
        query_retry: int = 1,
        transport: Optional[httpx.BaseTransport] = None,
        on_session_expired: Optional[Callable[[], None]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.on_session_expired = on_session_expired
        self.query_retry = max(0, int(query_retry))
        self._refresh_lock = threading.Lock()
        self._http = httpx.Client(
            base_url=self.base_url + "/",
            timeout=timeout,
            verify=verify,
            follow_redirects=True,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ErpClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # low level
    # ------------------------------------------------------------------
    def _auth_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.session.access_token:
            headers["Authorization"] = f"Bearer {self.session.access_token}"
        if self.session.csrf_token:
            headers["X-CSRF-Token"] = self.session.csrf_token
        return headers

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]],
        json: Any,
        files: Any,
        retry: int,
        authenticated: bool = True,
    ) -> httpx.Response:
        attempts = max(0, retry) + 1
        headers = self._auth_headers() if authenticated else {}
        for attempt in range(1, attempts + 1):
            try:
                resp = self._http.request(
                    method,
                    path.lstrip("/"),
                    params=clean_params(params),
                    json=json if files is None else None,
                    data=json if files is not None else None,
                    files=files,
                    headers=headers,
                )
            except httpx.TransportError as e:
                logger.warning("ERP %s %s failed (attempt %d/%d): %s", method, path, attempt, attempts, e)
                if attempt < attempts:
                    continue
                raise ErpApiError(503, CONNECTION_MESSAGE) from e
            if resp.status_code >= 500 and attempt < attempts:
                logger.warning("ERP %s %s -> %d, retrying", method, path, resp.status_code)
                continue
            return resp
        raise AssertionError("unreachable")  # pragma: no cover

    def _expire(self, reason: str) -> AuthenticationRequired:
        logger.info("%s, session cleared", reason)
        self.session.clear()
        if self.on_session_expired is not None:
            self.on_session_expired()
        return AuthenticationRequired()

    def _refresh(self, used_token: Optional[str]) -> None:
        with self._refresh_lock:
            current = self.session.access_token
            if current and current != used_token:
                # another request refreshed while we waited
                return
            refresh_token = self.session.refresh_token
            if not refresh_token:
                raise self._expire("No refresh token available")
            try:
                resp = self._send("POST", REFRESH_PATH, None, {"refreshToken": refresh_token}, None, 0, authenticated=False)
            except ErpApiError as e:
                raise self._expire(f"Token refresh failed ({e.message})") from e
            if resp.status_code >= 400:
                raise self._expire(f"Token refresh rejected ({resp.status_code})")
            body = _decode(resp)
            tokens = body.get("data") if isinstance(body.get("data"), dict) else body
            access = (tokens or {}).get("accessToken")
            if not access:
                raise self._expire("Token refresh returned no access token")
            self.session.update_tokens(access, tokens.get("refreshToken"))
            logger.info("Access token refreshed")

    def _perform(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        retry: int = 0,
    ) -> httpx.Response:
        used_token = self.session.access_token
        resp = self._send(method, path, params, json, files, retry)
        if resp.status_code == 401 and not path.startswith(NO_REFRESH_PATHS):
            self._refresh(used_token)
            resp = self._send(method, path, params, json, files, retry)
        if resp.status_code >= 400:
            err = error_from_response(resp.status_code, _decode(resp))
            logger.info("ERP %s %s -> %d: %s", method, path, resp.status_code, err.message)
            raise err
        return resp

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Any = None,
        retry: int = 0,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded response envelope."""
        return _decode(self._perform(method, path, params=params, json=json, files=files, retry=retry))

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", path, params=params, retry=self.query_retry)

    def post(self, path: str, json: Any = None, files: Any = None) -> Dict[str, Any]:
        return self.request("POST", path, json=json, files=files)

    def put(self, path: str, json: Any = None) -> Dict[str, Any]:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: Any = None) -> Dict[str, Any]:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str, json: Any = None) -> Dict[str, Any]:
        return self.request("DELETE", path, json=json)

    def download(self, path: str, params: Optional[Dict[str, Any]] = None) -> Tuple[bytes, str, Optional[str]]:
        """Binary endpoints (PDF, print, export). Returns (content, content_type, filename)."""
        resp = self._perform("GET", path, params=params, retry=self.query_retry)
        ctype = resp.headers.get("content-type", "application/octet-stream")
        return resp.content, ctype, _filename(resp.headers.get("content-disposition"))


def _decode(resp: httpx.Response) -> Dict[str, Any]:
    if resp.status_code == 204 or not resp.content:
        return {"success": resp.status_code < 400, "data": None}
    try:
        body = resp.json()
    except ValueError:
        return {"success": resp.status_code < 400, "data": None, "message": resp.text}
    if isinstance(body, dict):
        return body
    return {"success": resp.status_code < 400, "data": body}


def _filename(disposition: Optional[str]) -> Optional[str]:
    if not disposition:
        return None
    m = _FILENAME_RE.search(disposition)
    return m.group(1).strip() if m else None


def iter_pages(client: ErpClient, path: str, params: Optional[Dict[str, Any]] = None, limit: int = 100) -> Iterable[Dict[str, Any]]:
    """Walk a paginated list endpoint (meta.totalPages) and yield rows."""
    page = 1
    while True:
        body = client.get(path, {**(params or {}), "page": page, "limit": limit})
        rows = body.get("data") or []
        for row in rows:
            yield row
        meta = body.get("meta") or {}
        if page >= int(meta.get("totalPages") or 1) or not rows:
            break
        page += 1
