"""Vision model provider adapters for multiple vendors."""

import base64
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from picmeta.core.config import Settings
from picmeta.core.exceptions import MissingCredentialsError
from picmeta.models.generation import MetadataKind, PromptBundle, ProviderName

logger = logging.getLogger(__name__)


class ProviderCallError(Exception):
    """The provider call did not produce a usable response."""

    pass


class TransportError(ProviderCallError):
    """Network failure, timeout, or non-2xx response without an error body."""

    pass


class ProviderError(ProviderCallError):
    """The provider returned an error object in its response body."""

    pass


def _error_message(payload: Dict[str, Any]) -> Optional[str]:
    """Get the upstream error message if the payload is an error object."""
    if not isinstance(payload, dict) or "error" not in payload:
        return None
    error = payload["error"]
    if isinstance(error, dict):
        return error.get("message") or "Unknown error"
    return str(error) or "Unknown error"


class ProviderAdapter(Protocol):
    """Capability contract shared by the provider variants."""

    provider: ProviderName
    url: str

    def headers(self) -> Dict[str, str]: ...

    def params(self) -> Dict[str, str]: ...

    def build_request(
        self, prompt: PromptBundle, image_bytes: bytes, mime_type: str
    ) -> Dict[str, Any]: ...

    def extract_text(self, payload: Dict[str, Any]) -> str: ...


class ChatCompletionsAdapter:
    """OpenAI chat completions with a system message and an image_url part."""

    provider = ProviderName.OPENAI

    def __init__(self, api_key: str, model: str, base_url: str, max_tokens: int = 150):
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self.max_tokens = max_tokens

    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def params(self) -> Dict[str, str]:
        return {}

    def build_request(
        self, prompt: PromptBundle, image_bytes: bytes, mime_type: str
    ) -> Dict[str, Any]:
        data = base64.b64encode(image_bytes).decode("ascii")
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": prompt.system_message},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt.user_prompt},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{data}"},
                        },
                    ],
                },
            ],
            "max_tokens": self.max_tokens,
        }

    def extract_text(self, payload: Dict[str, Any]) -> str:
        message = _error_message(payload)
        if message is not None:
            raise ProviderError(f"OpenAI API error: {message}")
        try:
            content = payload["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return ""
        return (content or "").strip() if isinstance(content, str) else ""


class GenerateContentAdapter:
    """Gemini generateContent with a text part and an inline_data part."""

    provider = ProviderName.GEMINI

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        max_output_tokens: int = 150,
        temperature: float = 0.1,
    ):
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self.max_output_tokens = max_output_tokens
        self.temperature = temperature

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def params(self) -> Dict[str, str]:
        return {"key": self.api_key}

    def build_request(
        self, prompt: PromptBundle, image_bytes: bytes, mime_type: str
    ) -> Dict[str, Any]:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": prompt.user_prompt},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image_bytes).decode("ascii"),
                            }
                        },
                    ]
                }
            ],
            "generationConfig": {
                "maxOutputTokens": self.max_output_tokens,
                "temperature": self.temperature,
            },
        }

    def extract_text(self, payload: Dict[str, Any]) -> str:
        message = _error_message(payload)
        if message is not None:
            raise ProviderError(f"Gemini API error: {message}")
        try:
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return ""
        return (text or "").strip() if isinstance(text, str) else ""


def get_adapter(
    provider: ProviderName,
    settings: Settings,
    kind: MetadataKind = MetadataKind.ALT,
) -> ProviderAdapter:
    """Create the adapter for a provider.

    Args:
        provider: Provider to use.
        settings: Settings instance.
        kind: Metadata kind; filenames use a smaller output budget.

    Returns:
        Provider adapter.

    Raises:
        MissingCredentialsError: If the provider API key is not configured.
    """
    provider = ProviderName(provider)
    max_tokens = (
        settings.filename_max_output_tokens
        if MetadataKind(kind) == MetadataKind.FILENAME
        else settings.max_output_tokens
    )

    if provider == ProviderName.GEMINI:
        if not settings.gemini_api_key:
            raise MissingCredentialsError("Gemini")
        return GenerateContentAdapter(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            max_output_tokens=max_tokens,
            temperature=settings.gemini_temperature,
        )

    if not settings.openai_api_key:
        raise MissingCredentialsError("OpenAI")
    return ChatCompletionsAdapter(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        max_tokens=max_tokens,
    )


class ProviderClient:
    """Sends adapter payloads over HTTP. No automatic retries."""

    def __init__(self, timeout: float = 20.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def complete(self, adapter: ProviderAdapter, payload: Dict[str, Any]) -> str:
        """Post a payload and return the reply text.

        Raises:
            TransportError: On network failure, timeout, or a non-2xx response
                without an error body.
            ProviderError: If the response carries an error object.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    adapter.url,
                    json=payload,
                    headers=adapter.headers(),
                    params=adapter.params(),
                )
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout calling {adapter.provider.value} API") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Network error calling {adapter.provider.value} API: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and "error" in data:
            # Error bodies take precedence over the status code
            return adapter.extract_text(data)

        if response.status_code >= 400:
            raise TransportError(f"HTTP {response.status_code}: {response.text[:500]}")
        if not isinstance(data, dict):
            raise TransportError(f"Malformed response body: {response.text[:500]}")

        return adapter.extract_text(data)
