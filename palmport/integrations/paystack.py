"""Paystack client: transaction initialize and verify."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from palmport.config import PaystackConfig
from palmport.core.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

SUCCESS = "success"


@dataclass
class PaymentVerification:
    """Outcome of ``GET /transaction/verify/:reference``."""

    reference: str
    status: str
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCESS


class PaystackClient:
    def __init__(
        self,
        config: PaystackConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        if not self._config.secret_key:
            raise ConfigurationError("PAYSTACK_SECRET_KEY is not set")
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.timeout,
            headers={"Authorization": f"Bearer {self._config.secret_key}"},
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            async with self._client() as client:
                resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("PaystackClient: %s %s failed: %s", method, path, exc)
            raise UpstreamError(
                "Payment gateway unreachable", details={"reason": str(exc)}, cause=exc
            ) from exc
        try:
            body = resp.json()
        except ValueError:
            body = {"message": resp.text}
        if resp.status_code >= 400:
            logger.error(
                "PaystackClient: %s %s returned HTTP %d: %s",
                method, path, resp.status_code, body,
            )
            raise UpstreamError(
                "Payment gateway rejected the request",
                details={"status_code": resp.status_code, "upstream": body},
            )
        return body

    async def initialize_transaction(
        self,
        email: str,
        amount: float,
        reference: str,
        metadata: Optional[Dict[str, Any]] = None,
        *,
        callback_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Start a transaction; the response's ``data.authorization_url`` is the checkout page."""
        payload: Dict[str, Any] = {
            "email": email,
            "amount": round(amount),
            "reference": reference,
            "metadata": metadata or {},
        }
        if callback_url:
            payload["callback_url"] = callback_url
        body = await self._request("POST", "/transaction/initialize", json=payload)
        logger.info(
            "PaystackClient: initialized %s (authorization_url=%s)",
            reference, "yes" if (body.get("data") or {}).get("authorization_url") else "no",
        )
        return body

    async def verify_transaction(self, reference: str) -> PaymentVerification:
        body = await self._request("GET", f"/transaction/verify/{quote(reference, safe='')}")
        data = body.get("data") or {}
        status = str(data.get("status") or "unknown")
        logger.info("PaystackClient: verified %s → %s", reference, status)
        return PaymentVerification(reference=reference, status=status, raw=data)
