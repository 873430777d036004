"""
Generative model client.

Wraps an Azure OpenAI style chat-completions deployment. Every call goes
through the shared circuit breaker so a failing endpoint is skipped quickly.
"""

import logging
from typing import Optional

import httpx

from backend.app.core.config import settings
from backend.app.core.reliability import CircuitBreaker, ai_circuit_breaker

logger = logging.getLogger(__name__)


class AIClientError(Exception):
    """Raised when the model endpoint is unconfigured, unreachable or returns garbage."""


class ChatCompletionClient:
    """Minimal chat-completions client returning the first choice's text."""
    
    def __init__(
        self,
        endpoint: Optional[str],
        api_key: Optional[str],
        deployment: str,
        api_version: str,
        timeout: float,
        breaker: CircuitBreaker,
    ):
        self.endpoint = endpoint.rstrip("/") if endpoint else None
        self.api_key = api_key
        self.deployment = deployment
        self.api_version = api_version
        self.timeout = timeout
        self.breaker = breaker
    
    @property
    def configured(self) -> bool:
        return bool(self.endpoint and self.api_key)
    
    @property
    def url(self) -> str:
        return f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions"
    
    async def _post(self, payload: dict) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.url,
                params={"api-version": self.api_version},
                headers={"api-key": self.api_key},
                json=payload,
            )
            response.raise_for_status()
            return response.json()
    
    async def complete(self, system: str, prompt: str, max_tokens: int = 20, temperature: float = 0.4) -> str:
        """
        Send one system + user message pair and return the reply text.
        
        Raises:
            AIClientError: on missing configuration, open circuit, transport
                failure or a response without a message
        """
        if not self.configured:
            raise AIClientError("AI endpoint is not configured")
        
        payload = {
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            data = await self.breaker.call(self._post, payload)
        except httpx.HTTPError as e:
            logger.warning("AI request failed: %s", e)
            raise AIClientError(str(e)) from e
        except Exception as e:
            # CircuitOpenError and malformed JSON land here
            logger.warning("AI request rejected: %s", e)
            raise AIClientError(str(e)) from e
        
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIClientError("AI response had no message content") from e
        return str(content or "").strip()


ai_client = ChatCompletionClient(
    endpoint=settings.ai_endpoint,
    api_key=settings.ai_api_key,
    deployment=settings.ai_deployment,
    api_version=settings.ai_api_version,
    timeout=settings.ai_timeout_seconds,
    breaker=ai_circuit_breaker,
)


async def get_ai_client() -> ChatCompletionClient:
    """FastAPI dependency returning the shared model client."""
    return ai_client
