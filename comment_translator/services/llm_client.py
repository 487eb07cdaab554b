"""
Chat Completions Client
=======================
Client for an OpenAI-compatible ``/chat/completions`` endpoint.
"""
import requests
from typing import Optional, List, Dict
from dataclasses import dataclass
from comment_translator.config import config
from comment_translator.utils.logging import get_logger, debug_print
from comment_translator.models.schemas import ModelInfo


@dataclass
class ChatResponse:
    """Response from the chat endpoint."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    model: Optional[str] = None
    total_tokens: Optional[int] = None


class ChatClient:
    """Client for chat-completions interactions."""

    def __init__(self, base_url: str = None, api_key: str = None, model: str = None):
        self.base_url = (base_url or config.translator.base_url).rstrip('/')
        self.api_key = api_key if api_key is not None else config.translator.api_key
        self.model = model or config.translator.model
        self.logger = get_logger().app_logger

        self.session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(pool_connections=4, pool_maxsize=4)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)
        self.session.headers.update({'Content-Type': 'application/json'})
        if self.api_key:
            self.session.headers['Authorization'] = f"Bearer {self.api_key}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/chat/completions"

    @property
    def models_url(self) -> str:
        return f"{self.base_url}/models"

    def is_healthy(self) -> bool:
        """Check if the endpoint is reachable and accepts our credentials."""
        try:
            response = self.session.get(
                self.models_url,
                timeout=config.translator.health_check_timeout
            )
            return response.status_code == 200
        except requests.RequestException as e:
            self.logger.warning(f"Translator health check failed: {e}")
            return False

    def list_models(self) -> List[ModelInfo]:
        """List available models."""
        try:
            response = self.session.get(
                self.models_url,
                timeout=config.translator.connect_timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            self.logger.error(f"Failed to list models: {e}")
            return []

        return [
            ModelInfo(name=item.get('id', ''), owned_by=item.get('owned_by'))
            for item in data.get('data', [])
        ]

    def chat(
        self,
        messages: List[Dict[str, str]],
        model: str = None,
        temperature: float = None
    ) -> ChatResponse:
        """
        Send one chat request.

        Args:
            messages: Chat messages (``role`` / ``content`` dicts)
            model: Model to use (defaults to configured model)
            temperature: Sampling temperature

        Returns:
            ChatResponse; transport and format failures are reported through
            ``success=False`` rather than raised
        """
        model = model or self.model
        temperature = temperature if temperature is not None else config.translator.temperature

        payload = {
            'model': model,
            'messages': messages,
            'temperature': temperature,
        }

        debug_print(f"[LLM] POST {self.chat_url} model={model} messages={len(messages)}", 'DEBUG', 'LLM')

        try:
            response = self.session.post(
                self.chat_url,
                json=payload,
                timeout=(config.translator.connect_timeout, config.translator.read_timeout)
            )
            response.raise_for_status()
            result = response.json()
            content = result['choices'][0]['message']['content']
        except requests.Timeout:
            return ChatResponse(success=False, error="Request timed out", model=model)
        except requests.RequestException as e:
            return ChatResponse(success=False, error=str(e), model=model)
        except ValueError as e:
            return ChatResponse(success=False, error=f"Invalid JSON response: {e}", model=model)
        except (KeyError, IndexError, TypeError) as e:
            return ChatResponse(success=False, error=f"Unexpected response shape: {e!r}", model=model)

        if not isinstance(content, str):
            return ChatResponse(success=False, error="Message content is not text", model=model)

        return ChatResponse(
            success=True,
            text=content.strip(),
            model=model,
            total_tokens=(result.get('usage') or {}).get('total_tokens')
        )

    def close(self):
        """Close the session."""
        self.session.close()


_client_instance: Optional[ChatClient] = None


def get_chat_client() -> ChatClient:
    """Get or create the global chat client instance."""
    global _client_instance
    if _client_instance is None:
        _client_instance = ChatClient()
    return _client_instance
