import json
import os
import threading
from pathlib import Path
from typing import Dict, Optional

from .config import DEFAULT_SESSION_PATH
from .models import Session

ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"


class TokenStore:
    """Access/refresh token storage backed by a JSON file.

    Reads and writes go to an in-memory copy; ``load`` pulls the file in,
    ``save`` writes it back (0600) and ``clear`` forgets everything and removes
    the file. ``set``/``remove`` save immediately.
    """

    def __init__(self, path: Optional[str] = DEFAULT_SESSION_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._tokens: Dict[str, str] = {}

    def load(self) -> Session:
        # without a backing file the in-memory tokens are the session
        if not self.path:
            return self.session()
        tokens: Dict[str, str] = {}
        if Path(self.path).exists():
            data = json.loads(Path(self.path).read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("Session file must be a JSON object")
            raw = data.get("tokens") or {}
            if not isinstance(raw, dict):
                raise ValueError("Session tokens must be a JSON object")
            tokens = {k: str(v) for k, v in raw.items() if v}
        with self._lock:
            self._tokens = tokens
        return self.session()

    def save(self) -> None:
        if not self.path:
            return
        with self._lock:
            payload = {"tokens": dict(self._tokens)}
        session_path = Path(self.path)
        session_path.parent.mkdir(parents=True, exist_ok=True)
        session_path.write_text(json.dumps(payload, indent=2, ensure_ascii=True) + "\n", encoding="utf-8")
        os.chmod(session_path, 0o600)

    def clear(self) -> None:
        with self._lock:
            self._tokens = {}
        if self.path:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._tokens.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._tokens[key] = value
        self.save()

    def remove(self, key: str) -> None:
        with self._lock:
            self._tokens.pop(key, None)
        self.save()

    def store_session(self, access_token: str, refresh_token: Optional[str]) -> None:
        with self._lock:
            self._tokens[ACCESS_TOKEN] = access_token
            if refresh_token:
                self._tokens[REFRESH_TOKEN] = refresh_token
            else:
                self._tokens.pop(REFRESH_TOKEN, None)
        self.save()

    def session(self) -> Session:
        with self._lock:
            return Session(
                access_token=self._tokens.get(ACCESS_TOKEN),
                refresh_token=self._tokens.get(REFRESH_TOKEN),
            )

    @property
    def access_token(self) -> Optional[str]:
        return self.get(ACCESS_TOKEN)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.get(REFRESH_TOKEN)
