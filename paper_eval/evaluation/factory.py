from typing import Any, ClassVar

from paper_eval.config.settings import Settings
from paper_eval.evaluation.example_client_adapter import ExampleClientAdapter
from paper_eval.evaluation.models import ChatModel
from paper_eval.evaluation.openai_client_adapter import OpenAIClientAdapter


class EvaluationClientFactory:
    """Creates the configured evaluation client and model binding."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> ChatModel:
        """Create a client/model pair from application settings."""
        provider = settings.evaluation_provider.strip().lower()
        if provider == "example":
            return ChatModel(client=ExampleClientAdapter(), model="example", temperature=0.0)
        client = OpenAIClientAdapter(
            api_key=cls._setting(provider, "api_key", settings, ""),
            timeout_seconds=cls._setting(provider, "timeout_seconds", settings, 120),
            base_url=cls._resolve_base_url(provider, settings),
        )
        return ChatModel(
            client=client,
            model=cls._setting(provider, "model_name", settings, ""),
            temperature=cls._resolve_temperature(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.evaluation_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "evaluation_openai_compatible_base_url is required for "
                    "evaluation_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown evaluation provider '{provider}'. Choose from: {supported}"
        )

    @staticmethod
    def _setting(provider: str, name: str, settings: Settings, default: Any) -> Any:
        value = getattr(settings, f"evaluation_{provider}_{name}", None)
        return value or default

    @classmethod
    def _resolve_temperature(cls, provider: str, settings: Settings) -> float:
        if provider == "openai":
            return settings.evaluation_openai_temperature
        return 0.0
