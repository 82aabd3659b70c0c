"""
API Session
===========

Shared HTTP plumbing for the generative API: one ``httpx.AsyncClient`` and one
credential per session, plus the request part types every client builds.
"""

import base64
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Union, Sequence, List

import httpx

from ..core.config import ApiConfig, DEFAULT_BASE_URL, api_key_from_env
from ..core.exceptions import ProviderError, ValidationError
from ..core.security import redact_api_key
from ..utils.image_utils import UploadedImagePayload

logger = logging.getLogger(__name__)


# =============================================================================
# Request Parts
# =============================================================================


@dataclass(frozen=True)
class ImagePart:
    """Inline binary image payload."""

    data: bytes
    mime_type: str

    def to_api(self) -> Dict[str, Any]:
        return {
            "inlineData": {
                "mimeType": self.mime_type,
                "data": base64.b64encode(self.data).decode("utf-8"),
            }
        }


@dataclass(frozen=True)
class TextPart:
    """Text segment of a multi-part request."""

    text: str

    def to_api(self) -> Dict[str, Any]:
        return {"text": self.text}


Part = Union[ImagePart, TextPart]
PartLike = Union[Part, UploadedImagePayload, str]


def as_part(value: PartLike) -> Part:
    """Coerce payloads and plain strings into request parts."""
    if isinstance(value, (ImagePart, TextPart)):
        return value
    if isinstance(value, UploadedImagePayload):
        return value.to_part()
    if isinstance(value, str):
        return TextPart(text=value)
    raise ValidationError(
        f"Unsupported request part: {type(value).__name__}",
        field="parts",
    )


def build_parts(values: Sequence[PartLike]) -> List[Part]:
    """Ordered request parts; order is preserved exactly as given."""
    if not values:
        raise ValidationError("A generation request needs at least one part", field="parts")
    return [as_part(value) for value in values]


# =============================================================================
# Session
# =============================================================================


class ApiSession:
    """
    Owns the HTTP client and credential for one session.

    The key and base URL are fixed at construction; clients built on the same
    session share the connection pool.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the session.

        Args:
            api_key: API key (or read from GEMINI_API_KEY / GOOGLE_API_KEY)
            base_url: Base URL for the API
            timeout: Request timeout in seconds; None waits indefinitely
            http_client: Pre-built client, mainly for tests
        """
        self._api_key = api_key or api_key_from_env()
        self._base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout

        self._client: Optional[httpx.AsyncClient] = http_client
        self._owns_client = http_client is None

        if not self._api_key:
            logger.warning(
                "No API key configured. Set GEMINI_API_KEY or pass api_key."
            )

    @classmethod
    def from_config(
        cls,
        config: ApiConfig,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ApiSession":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
            http_client=http_client,
        )

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Content-Type": "application/json"},
            )
        return self._client

    def url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def _params(self) -> Dict[str, str]:
        return {"key": self._api_key} if self._api_key else {}

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON body and return the decoded response."""
        url = self.url(path)
        logger.debug(f"POST {url}")
        response = await self._get_client().post(url, json=payload, params=self._params())
        return self._decode(response)

    async def get_json(self, path: str) -> Dict[str, Any]:
        """GET a resource and return the decoded response."""
        url = self.url(path)
        logger.debug(f"GET {url}")
        response = await self._get_client().get(url, params=self._params())
        return self._decode(response)

    async def fetch(self, url: str) -> httpx.Response:
        """Authenticated GET of a delivered media URI; the caller checks the status."""
        return await self._get_client().get(
            url, params=self._params(), follow_redirects=True
        )

    def _decode(self, response: httpx.Response) -> Dict[str, Any]:
        if not response.is_success:
            raise ProviderError(
                f"API error: {response.status_code} - {redact_api_key(response.text)}",
                status_code=response.status_code,
                response_body=redact_api_key(response.text),
            )
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Invalid JSON in API response: {e}",
                status_code=response.status_code,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client if this session created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
