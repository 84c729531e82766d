from abc import ABC, abstractmethod
from typing import Any


class ChatProvider(ABC):
    """A remote model reachable through a chat-completion call.

    ``name`` is the slot in the fallback chain ("primary", "secondary");
    ``label`` is the vendor, used in log lines.
    """

    name: str = ""
    label: str = ""

    @abstractmethod
    def complete(self, messages: list[dict[str, str]], *, json_mode: bool = True) -> Any:
        """Return the reply content; raise ``ProviderError`` on failure."""
