import logging
import time
from typing import Any, Dict, Optional

import requests

from shared.core.config import settings

logger = logging.getLogger(__name__)


class ChapaError(ValueError):
    """Raised for any provider-side failure; surfaces as a 400."""


class ChapaClient:
    """Client for the Chapa hosted checkout API."""

    def __init__(self, secret_key: Optional[str] = None, base_url: Optional[str] = None,
                 timeout: Optional[int] = None):
        self.secret_key = secret_key if secret_key is not None else settings.CHAPA_SECRET_KEY
        self.base_url = (base_url or settings.CHAPA_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.CHAPA_TIMEOUT

    @property
    def test_mode(self) -> bool:
        return not self.secret_key or "TEST" in self.secret_key

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def build_tx_ref(intent_id: str) -> str:
        return f"CHAPA-{intent_id}-{int(time.time() * 1000)}"

    def initialize(self, *, amount: float, currency: str, tx_ref: str,
                   email: Optional[str], first_name: str, last_name: str,
                   return_url: str, callback_url: Optional[str] = None,
                   title: str = "Rent payment", description: Optional[str] = None,
                   meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Start a hosted checkout and return {checkout_url, tx_ref, test_mode}."""
        if self.test_mode:
            logger.info(f"Chapa test mode: mock checkout for {tx_ref}")
            return {
                "checkout_url": f"{return_url}?tx_ref={tx_ref}&status=success&mock=true",
                "tx_ref": tx_ref,
                "test_mode": True,
            }

        body = {
            "amount": f"{amount:.2f}",
            "currency": currency,
            "email": email,
            "first_name": first_name,
            "last_name": last_name,
            "tx_ref": tx_ref,
            "callback_url": callback_url,
            "return_url": return_url,
            "customization": {"title": title[:16], "description": description or title},
            "meta": meta or {},
        }
        try:
            resp = requests.post(f"{self.base_url}/transaction/initialize",
                                 json=body, headers=self._headers(), timeout=self.timeout)
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ChapaError(f"Payment provider error: {e}") from e

        if resp.status_code >= 400 or data.get("status") != "success":
            raise ChapaError(f"Payment provider error: {data.get('message') or resp.status_code}")

        checkout_url = (data.get("data") or {}).get("checkout_url")
        if not checkout_url:
            raise ChapaError("Payment provider error: no checkout URL returned")
        logger.info(f"Chapa checkout initialized for {tx_ref}")
        return {"checkout_url": checkout_url, "tx_ref": tx_ref, "test_mode": False}

    def verify(self, tx_ref: str) -> Dict[str, Any]:
        """Return {success, status, data} for a transaction reference."""
        if self.test_mode:
            return {"success": True, "status": "success", "data": {"tx_ref": tx_ref, "mock": True}}

        try:
            resp = requests.get(f"{self.base_url}/transaction/verify/{tx_ref}",
                                headers=self._headers(), timeout=self.timeout)
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ChapaError(f"Payment provider error: {e}") from e

        tx = data.get("data") or {}
        tx_status = (tx.get("status") or data.get("status") or "").lower()
        return {
            "success": resp.status_code < 400 and tx_status in ("success", "successful"),
            "status": tx_status,
            "data": tx,
            "message": data.get("message"),
        }
