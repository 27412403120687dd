from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import json, os, threading


class SessionStore:
    """
    Persists the console's login session (tokens + current user) as JSON:
    CONSOLE_DATA_ROOT/state/session.json
    """

    def __init__(self, data_root: Path):
        self.path = Path(data_root) / "state" / "session.json"
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _atomic_write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)

    def load(self) -> Dict[str, Any]:
        with self._lock:
            return dict(self._data)

    def save(self, tokens: Dict[str, Any], user: Optional[Dict[str, Any]] = None) -> None:
        with self._lock:
            data = dict(self._data)
            for key in ("accessToken", "refreshToken", "csrfToken"):
                if tokens.get(key):
                    data[key] = tokens[key]
            if user is not None:
                data["user"] = user
            self._data = data
            self._atomic_write(data)

    def update_tokens(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        tokens = {"accessToken": access_token}
        if refresh_token:
            tokens["refreshToken"] = refresh_token
        self.save(tokens)

    def clear(self) -> None:
        with self._lock:
            self._data = {}
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass

    @property
    def access_token(self) -> Optional[str]:
        return self._data.get("accessToken")

    @property
    def refresh_token(self) -> Optional[str]:
        return self._data.get("refreshToken")

    @property
    def csrf_token(self) -> Optional[str]:
        return self._data.get("csrfToken")

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._data.get("user")

    @property
    def is_authenticated(self) -> bool:
        return bool(self._data.get("accessToken"))
