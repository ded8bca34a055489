"""Off-chain metadata store client."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from core.errors import MetadataUploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadReceipt:
    url: str


class MetadataStore(Protocol):
    def upload(self, metadata: dict) -> UploadReceipt:
        ...


class HttpMetadataStore:
    """POSTs the metadata document as JSON and expects ``{"url": ...}`` back."""

    def __init__(
        self,
        upload_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not upload_url:
            raise ValueError("upload_url is required.")
        self._upload_url = upload_url
        self._timeout = timeout
        self._transport = transport

    def upload(self, metadata: dict) -> UploadReceipt:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._upload_url, json=metadata)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise MetadataUploadError(
                f"Metadata upload rejected with HTTP {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise MetadataUploadError(f"Metadata upload failed: {exc}") from exc
        except ValueError as exc:
            raise MetadataUploadError("Metadata store returned invalid JSON.") from exc

        url = payload.get("url") if isinstance(payload, dict) else None
        if not isinstance(url, str) or not url:
            raise MetadataUploadError("Metadata store response did not include a URL.")
        logger.info("Uploaded metadata to %s", url)
        return UploadReceipt(url=url)
