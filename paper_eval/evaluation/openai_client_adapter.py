import httpx
import openai

from paper_eval.evaluation.client_base import BaseEvaluationClient
from paper_eval.evaluation.exceptions import EvaluationError, EvaluationNetworkError


class OpenAIClientAdapter(BaseEvaluationClient):
    """Evaluation client built on the async OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise EvaluationNetworkError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise EvaluationNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise EvaluationError("AI returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise EvaluationError("AI returned empty response")
        return content
