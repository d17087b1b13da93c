"""
Remote Summarization Client

Thin client for a hosted summarization model (Hugging Face Inference API).
The response shape varies between models and API versions; it is
normalized here into a single RemoteSummary result so callers never
inspect raw payloads.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .exceptions import ModelClientError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://router.huggingface.co/hf-inference/models"
DEFAULT_TIMEOUT = 60
HEALTH_CHECK_TEXT = (
    "This is a simple test to check if the API is working properly. "
    "The test should return a brief summary."
)


@dataclass(frozen=True)
class RemoteSummary:
    """Outcome of a remote summarization call: either text or an error."""
    text: Optional[str] = None
    error: Optional[str] = None
    model: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.text) and self.error is None


class HuggingFaceSummarizationClient:
    """Calls summarization models hosted on the Hugging Face Inference API."""

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        health_check_model: str = "sshleifer/distilbart-cnn-12-6",
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            api_key: Inference API token; calls fail fast without one
            api_url: Base URL, the model name is appended
            timeout: Per-request timeout in seconds
            health_check_model: Model used by ping()
            session: Optional preconfigured requests session
        """
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.health_check_model = health_check_model
        self.session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def summarize(self, text: str, params: Dict[str, Any], model: str) -> RemoteSummary:
        """
        Summarize text with a hosted model.

        Args:
            text: Preprocessed input text
            params: Generation parameters (max_length, min_length, ...)
            model: Model identifier, e.g. 'facebook/bart-large-cnn'

        Returns:
            RemoteSummary carrying the summary text or the failure reason
        """
        try:
            payload = self._post(model, {"inputs": text, "parameters": params})
            summary = self._parse_summary(payload)
        except ModelClientError as e:
            logger.warning(f"Remote summarization with {model} failed: {e}")
            return RemoteSummary(error=str(e), model=model)

        return RemoteSummary(text=summary, model=model)

    def ping(self) -> bool:
        """Check that the API answers a tiny summarization request."""
        result = self.summarize(
            HEALTH_CHECK_TEXT,
            {"max_length": 50, "min_length": 10},
            self.health_check_model
        )
        return result.ok

    def abort(self):
        """
        Close the HTTP session and continue with a fresh one.

        Pooled connections are dropped right away. A request already waiting
        on the server holds its connection until the response or the timeout
        arrives; that connection is then discarded instead of reused.
        """
        session, self.session = self.session, requests.Session()
        session.close()
        logger.info("Remote summarization session aborted")

    def close(self):
        self.session.close()

    def _post(self, model: str, body: Dict[str, Any]) -> Any:
        if not self.configured:
            raise ModelClientError("No API key configured")

        url = f"{self.api_url}/{model}"
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = self.session.post(url, json=body, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise ModelClientError(f"Request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ModelClientError(f"Request failed: {e}") from e
        except ValueError as e:
            raise ModelClientError("Response is not valid JSON") from e

    @staticmethod
    def _parse_summary(payload: Any) -> str:
        """Pull the summary text out of the known response shapes."""
        if isinstance(payload, list):
            payload = payload[0] if payload else {}

        if not isinstance(payload, dict):
            raise ModelClientError(f"Unexpected response type: {type(payload).__name__}")

        if payload.get("error"):
            raise ModelClientError(str(payload["error"]))

        summary = payload.get("summary_text") or payload.get("generated_text")
        if not summary or not str(summary).strip():
            raise ModelClientError("Model returned an empty summary")

        return str(summary).strip()
