import logging
import os
from typing import Dict, Iterable, List, Optional

import requests

logger = logging.getLogger(__name__)

BACKEND_PORT = os.getenv("CHAT_BACKEND_PORT", "8001")
BACKEND_BASE = f"http://chat-backend:{BACKEND_PORT}"           # works from inside Docker
API_BASE     = f"http://host.docker.internal:{BACKEND_PORT}"
LOCAL_BASE   = f"http://localhost:{BACKEND_PORT}"


class ExchangeError(Exception):
    """The exchange endpoint could not be reached or answered with something unusable."""


def choose_api_base(candidates: Iterable[str] = (BACKEND_BASE, API_BASE, LOCAL_BASE)) -> str:
    """Pick the first backend base that answers its ping; CHAT_BACKEND_URL wins when set."""
    explicit = os.getenv("CHAT_BACKEND_URL", "").strip()
    if explicit:
        return explicit.rstrip("/")

    candidates = list(candidates)
    for base in candidates:
        try:
            r = requests.get(f"{base}/debug/ping", timeout=1)
            if r.ok:
                return base
        except requests.RequestException:
            logger.debug(f"Backend not reachable at {base}")
    return candidates[-1]  # fallback


class ExchangeClient:
    """Thin transport for POST /api/chat."""

    def __init__(self, api_base: str, session: Optional[requests.Session] = None):
        self.api_base = api_base.rstrip("/")
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.api_base}/api/chat"

    def send_history(self, messages: List[Dict[str, str]]) -> Dict:
        return self._post({"messages": messages})

    def send_message(self, message: str) -> Dict:
        return self._post({"message": message})

    def _post(self, payload: Dict) -> Dict:
        try:
            response = self.session.post(self.url, json=payload)
        except requests.RequestException as e:
            raise ExchangeError(f"Could not reach the advisor backend: {e}") from e

        if not response.ok:
            raise ExchangeError(f"Advisor backend returned {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise ExchangeError("Advisor backend returned a body that is not JSON") from e

        if not isinstance(data, dict):
            raise ExchangeError("Advisor backend returned an unexpected body")
        return data
