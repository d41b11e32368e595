#Purpose: The push/SMS gateway "adapter/client".
#Sole responsibility: talk to the notification gateway via HTTP.
#Encapsulates gateway-specific details:
#URL construction (/push, /sms)
#timeouts and error handling
#It should not contain scheduling rules or message wording.

import os
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv

# Read gateway base URL from environment
# Example in .env:
# NOTIFY_BASE_URL=http://localhost:8081
# NOTIFY_API_KEY=secret
load_dotenv()
BASE_URL = os.getenv("NOTIFY_BASE_URL")
API_KEY = os.getenv("NOTIFY_API_KEY")


class NotificationError(Exception):
    """Raised when a push or SMS could not be handed to the gateway."""
    pass


class NotificationClient:
    """
    Notification gateway client

    Sole responsibility:
    - POST push notifications and SMS messages
    - bound every request with `timeout`
    - normalize every failure into NotificationError
    """
    def __init__(self, base_url: Optional[str] = None, timeout: float = 5, api_key: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or BASE_URL or "").rstrip("/")
        self.timeout = timeout #seconds to wait for the gateway before giving up
        self.api_key = api_key or API_KEY
        self.session = session or requests.Session()

        if not self.base_url:
            raise ValueError("Notification gateway URL not set. Please set NOTIFY_BASE_URL in the .env file.")

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = self.session.post(
                f"{self.base_url}{path}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise NotificationError(f"Gateway request to {path} failed: {e}") from e

        if not response.ok:
            raise NotificationError(f"Gateway error on {path}: HTTP {response.status_code}")

        if not response.content:
            return {}
        return response.json()

    def send_push(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._post("/push", {
            "user_id": user_id,
            "title": title,
            "body": body,
            "data": data or {},
        })

    def send_sms(self, phone: str, message: str) -> Dict[str, Any]:
        return self._post("/sms", {"to": phone, "message": message})
