from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import Config


class BaseDriver(ABC):
    """Abstract base for provider-specific text generation.

    A driver owns one provider's HTTP call pattern and envelope format. It
    receives fully rendered prompt text and returns the reply text
    verbatim; prompt shaping and reply parsing stay in LLMClient.
    """

    def __init__(self, config: Config) -> None:
        self.config = config

    @abstractmethod
    def invoke(self, prompt: str) -> str:
        """Send ``prompt`` in a single request and return the reply text.

        Must raise an ``LLMError`` subclass for every failure.
        """
        raise NotImplementedError
