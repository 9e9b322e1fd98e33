"""
External text-generation API client.
Sends the built prompt to a chat-completions style endpoint and returns the
drafted summary text. Supports mock mode for development when no endpoint is
configured.
"""
import logging
from typing import Optional
import httpx
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_fixed
from ..core.config import settings
from ..core.errors import UpstreamError
from .prompt_builder import SEPARATOR, build_messages

logger = logging.getLogger(__name__)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


def extract_content(payload) -> str:
    """Pull ``choices[0].message.content`` out of a response body."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise UpstreamError("Invalid response structure from generation API")
    if not isinstance(content, str) or not content.strip():
        raise UpstreamError("Invalid response structure from generation API")
    return content


def _mock_draft(prompt: str) -> str:
    """Return the report block of the prompt, as a well-behaved model would."""
    parts = prompt.split(SEPARATOR)
    body = parts[1] if len(parts) >= 3 else prompt
    return body.strip() + "\n"


class GenerationClient:
    """HTTP client for the external summary-generation API."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        mock_mode: Optional[bool] = None,
        max_attempts: Optional[int] = None,
        retry_wait: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint if endpoint is not None else settings.GENERATION_API_ENDPOINT
        self.api_key = api_key if api_key is not None else settings.GENERATION_API_KEY
        self.model = model or settings.GENERATION_MODEL
        self.max_tokens = max_tokens or settings.GENERATION_MAX_TOKENS
        self.timeout = timeout or settings.GENERATION_TIMEOUT
        self.mock_mode = settings.GENERATION_MOCK_MODE if mock_mode is None else mock_mode
        self.max_attempts = max(1, max_attempts or settings.GENERATION_MAX_ATTEMPTS)
        self.retry_wait = settings.GENERATION_RETRY_WAIT if retry_wait is None else retry_wait
        self.transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _post(self, body: dict) -> dict:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            resp = client.post(self.endpoint, json=body, headers=self._headers())
            resp.raise_for_status()
            return resp.json()

    def generate(self, prompt: str) -> str:
        """
        Send the prompt to the generation API and return the drafted text.
        Raises UpstreamError on transport failure, HTTP error or malformed body.
        Transient failures are retried only when max_attempts > 1.
        """
        if self.mock_mode:
            logger.debug("Using mock generation response (mock_mode=%s)", self.mock_mode)
            return _mock_draft(prompt)
        if not self.endpoint:
            raise UpstreamError("Generation API endpoint is not configured")

        body = {
            "model": self.model,
            "messages": build_messages(prompt),
            "max_tokens": self.max_tokens,
        }
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception(_is_transient),
            reraise=True,
        )
        try:
            payload = retrying(self._post, body)
        except httpx.HTTPError as exc:
            logger.error("Generation API error: %s", exc)
            raise UpstreamError("Generation API request failed") from exc
        except ValueError as exc:
            logger.error("Generation API returned non-JSON body: %s", exc)
            raise UpstreamError("Invalid response structure from generation API") from exc

        try:
            return extract_content(payload)
        except UpstreamError:
            logger.error("Generation API returned malformed payload")
            raise


def get_generation_client() -> GenerationClient:
    return GenerationClient()
