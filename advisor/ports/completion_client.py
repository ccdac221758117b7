"""
Completion client port (interface).

The advisor forwards prompts to an external chat completion provider.
"""
from abc import ABC, abstractmethod


class CompletionClient(ABC):
    """Abstract chat completion provider."""

    @abstractmethod
    async def complete(self, system_prompt: str, question: str) -> str:
        """
        Generate an answer.

        Args:
            system_prompt: Instructions and user context
            question: The user's question

        Returns:
            Answer text

        Raises:
            UpstreamUnavailableError: If the provider fails or is unreachable
        """
        pass
