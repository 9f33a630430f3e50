"""Offline evaluation client selected with ``EVALUATION_PROVIDER=example``.

New providers subclass BaseEvaluationClient and get a branch in
EvaluationClientFactory; OpenAI-compatible ones only need a base URL.
"""

from typing import ClassVar

from paper_eval.evaluation.client_base import BaseEvaluationClient


class ExampleClientAdapter(BaseEvaluationClient):
    """Answers every prompt with a canned markdown evaluation or synthesis.

    Makes no network calls; the canned evaluation parses into one finding.
    """

    DEFAULT_EVALUATION: ClassVar[str] = (
        "### Key Finding #1\n"
        "- **Criteria**: Effect of the studied intervention on the primary outcome\n"
        "- **Value**: The intervention group improved compared with control\n"
        "- **Evidence Level**: 2 (randomized controlled trial)\n"
        "- **Source**: Example paper\n"
        "- **Methodology Quality**: Moderate, single-centre sample\n"
        "- **Importance**: Supports further confirmatory trials\n"
    )
    DEFAULT_SYNTHESIS: ClassVar[str] = (
        "### Rank #1\n"
        "- **Finding**: The intervention improved the primary outcome across papers\n"
        "- **Evidence Level**: 2\n"
        "- **Source**: Example paper\n"
        "- **Context & Methodology**: Randomized controlled trials\n"
    )

    def __init__(self) -> None:
        pass

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, user_prompt
        if "synthesiz" in system_prompt.lower():
            return self.DEFAULT_SYNTHESIS
        return self.DEFAULT_EVALUATION
