"""Cloudinary image host: signed upload of base64 images over the REST API."""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx
from cloudinary.utils import api_sign_request

from palmport.config import CloudinaryConfig
from palmport.core.exceptions import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

_UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


class CloudinaryUploader:
    def __init__(
        self,
        config: CloudinaryConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    async def upload(self, image_base64: str) -> str:
        """Upload a data-URI/base64 image and return its ``secure_url``."""
        if not self._config.is_configured:
            raise ConfigurationError("Cloudinary credentials are not configured")
        params: Dict[str, Any] = {"timestamp": int(time.time())}
        if self._config.folder:
            params["folder"] = self._config.folder
        form = {
            **params,
            "file": image_base64,
            "api_key": self._config.api_key,
            "signature": api_sign_request(params, self._config.api_secret or ""),
        }
        url = _UPLOAD_URL.format(cloud_name=self._config.cloud_name)
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout, transport=self._transport) as client:
                resp = await client.post(url, data=form)
        except httpx.HTTPError as exc:
            logger.error("CloudinaryUploader: upload failed: %s", exc)
            raise UpstreamError("Image upload failed", details={"reason": str(exc)}, cause=exc) from exc
        if resp.status_code >= 400:
            logger.error("CloudinaryUploader: HTTP %d: %s", resp.status_code, resp.text)
            raise UpstreamError(
                "Image upload failed",
                details={"status_code": resp.status_code, "upstream": resp.text[:500]},
            )
        secure_url = resp.json().get("secure_url")
        logger.info("CloudinaryUploader: uploaded image → %s", secure_url)
        return secure_url
