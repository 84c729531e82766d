"""Chat providers that speak the OpenAI chat-completions API (OpenAI, xAI)."""
from __future__ import annotations

from typing import Any

from jobtracker.errors import ProviderError
from jobtracker.log import get_logger
from jobtracker.providers.base import ChatProvider

log = get_logger(__name__)


class OpenAICompatibleProvider(ChatProvider):
    def __init__(
        self,
        name: str,
        label: str,
        *,
        api_key: str,
        model: str,
        base_url: str,
        temperature: float = 0.7,
        max_tokens: int = 1200,
    ) -> None:
        self.name = name
        self.label = label
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name}={self.label}:{self.model}>"

    @property
    def client(self):
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def complete(self, messages: list[dict[str, str]], *, json_mode: bool = True) -> Any:
        import openai

        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            r = self.client.chat.completions.create(**kwargs)
        except openai.APIStatusError as exc:
            raise ProviderError(self.name, _status_message(exc), status=exc.status_code) from exc
        except openai.APIError as exc:
            raise ProviderError(self.name, str(exc)) from exc

        if not r.choices:
            return "{}"
        content = r.choices[0].message.content
        log.debug("%s replied with %d chars", self.label, len(content or ""))
        return content or "{}"


def _status_message(exc: Any) -> str:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str):
            return err
    return str(getattr(exc, "message", "") or exc)
