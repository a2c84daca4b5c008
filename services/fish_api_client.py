"""HTTP client for the fish image-recognition service.

The service exposes two endpoints, both guarded by an ``X-API-Key`` header:

    POST {base}/predict?topk=N      multipart body with the image as ``file``
    POST {base}/predict_url         JSON body ``{"url": ..., "topk": N}``

and answers ``{"detections": n, "results": [...]}``. The raw body is handed to
the detection normalizer; this module owns only transport concerns.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import httpx
from loguru import logger

from config.config import DetectionApiConfig
from core.error_handler import retry_on_failure
from core.exceptions import DetectionError
from species.detection import DetectionResponse, parse_detection_response
from species.resolver import SpeciesResolver


class FishApiClient:
    """Calls the detection service and returns normalized candidates.

    Transport failures (connection errors, timeouts) are retried up to
    ``config.max_retries`` attempts; HTTP error statuses are not.

    Args:
        config: Detection API settings
        resolver: Resolver used to normalize the returned labels
        transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        retry_delay: Seconds between retried attempts
    """

    def __init__(
        self,
        config: DetectionApiConfig,
        resolver: SpeciesResolver,
        transport: Optional[httpx.BaseTransport] = None,
        retry_delay: float = 1.0,
    ) -> None:
        self.config = config
        self.resolver = resolver
        if not config.api_key:
            logger.warning("Fish API key is not set; requests will likely be rejected")
        self._client = httpx.Client(
            base_url=config.base_url.rstrip("/"),
            headers={"X-API-Key": config.api_key or ""},
            timeout=httpx.Timeout(config.timeout_s),
            transport=transport,
        )
        self._post = retry_on_failure(
            max_retries=config.max_retries,
            delay=retry_delay,
            exceptions=(httpx.TransportError,),
        )(self._client.post)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FishApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def detect_file(self, image: Union[str, Path], top_k: Optional[int] = None) -> DetectionResponse:
        """Upload an image file and return ranked candidates.

        Raises:
            DetectionError: If the file cannot be read or the call fails
        """
        top_k = top_k or self.config.top_k
        path = Path(image)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise DetectionError(f"Cannot read image {path}: {e}") from e

        files = {"file": (path.name, content, "application/octet-stream")}
        body = self._request("/predict", params={"topk": top_k}, files=files)
        return parse_detection_response(body, top_k, self.resolver)

    def detect_url(self, url: str, top_k: Optional[int] = None) -> DetectionResponse:
        """Let the service fetch an already uploaded image and classify it.

        Raises:
            DetectionError: If the call fails
        """
        top_k = top_k or self.config.top_k
        body = self._request("/predict_url", json={"url": url, "topk": top_k})
        return parse_detection_response(body, top_k, self.resolver)

    def _request(self, path: str, **kwargs: Any) -> Any:
        try:
            response = self._post(path, **kwargs)
        except httpx.HTTPError as e:
            raise DetectionError(f"Fish detection request failed: {e}") from e

        if response.is_error:
            raise DetectionError(f"Fish detection failed ({response.status_code}): {response.text}")
        try:
            body = response.json()
        except ValueError as e:
            raise DetectionError("Empty or invalid JSON response from fish API") from e
        if body is None:
            raise DetectionError("Empty or invalid JSON response from fish API")

        logger.debug(f"Fish API {path} answered with {len(body.get('results') or []) if isinstance(body, dict) else 0} results")
        return body
