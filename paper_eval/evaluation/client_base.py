from abc import ABC, abstractmethod


class BaseEvaluationClient(ABC):
    """Contract for provider-specific evaluation AI clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the provider's markdown answer as plain text.

        Raises:
            EvaluationNetworkError: on transport or provider API failures.
            EvaluationError: when the provider returns no usable content.
        """
