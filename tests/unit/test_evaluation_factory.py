from unittest.mock import patch

import pytest

from paper_eval.config.settings import Settings
from paper_eval.evaluation.example_client_adapter import ExampleClientAdapter
from paper_eval.evaluation.factory import EvaluationClientFactory
from paper_eval.evaluation.openai_client_adapter import OpenAIClientAdapter


def _settings(**overrides: object) -> Settings:
    return Settings(**overrides)  # type: ignore[arg-type]


class TestExampleProvider:
    def test_creates_example_client(self) -> None:
        chat_model = EvaluationClientFactory.create(_settings(evaluation_provider="example"))
        assert isinstance(chat_model.client, ExampleClientAdapter)
        assert chat_model.model == "example"
        assert chat_model.temperature == 0.0


class TestOpenAIProvider:
    def test_uses_openai_settings(self) -> None:
        settings = _settings(
            evaluation_provider="openai",
            evaluation_openai_api_key="sk-test",
            evaluation_openai_model_name="gpt-test",
            evaluation_openai_temperature=0.4,
            evaluation_openai_timeout_seconds=45,
        )
        with patch(
            "paper_eval.evaluation.factory.OpenAIClientAdapter", autospec=True
        ) as adapter_cls:
            chat_model = EvaluationClientFactory.create(settings)

        adapter_cls.assert_called_once_with(api_key="sk-test", timeout_seconds=45, base_url=None)
        assert chat_model.model == "gpt-test"
        assert chat_model.temperature == 0.4

    def test_builds_real_adapter(self) -> None:
        settings = _settings(evaluation_provider="openai", evaluation_openai_api_key="sk-test")
        chat_model = EvaluationClientFactory.create(settings)
        assert isinstance(chat_model.client, OpenAIClientAdapter)


class TestOpenAICompatibleProviders:
    def test_requires_base_url(self) -> None:
        settings = _settings(evaluation_provider="openai_compatible")
        with pytest.raises(ValueError, match="evaluation_openai_compatible_base_url"):
            EvaluationClientFactory.create(settings)

    def test_uses_configured_base_url(self) -> None:
        settings = _settings(
            evaluation_provider="openai_compatible",
            evaluation_openai_compatible_api_key="key",
            evaluation_openai_compatible_model_name="local-model",
            evaluation_openai_compatible_base_url="http://llm.local/v1",
        )
        with patch(
            "paper_eval.evaluation.factory.OpenAIClientAdapter", autospec=True
        ) as adapter_cls:
            chat_model = EvaluationClientFactory.create(settings)

        adapter_cls.assert_called_once_with(
            api_key="key", timeout_seconds=120, base_url="http://llm.local/v1"
        )
        assert chat_model.model == "local-model"
        assert chat_model.temperature == 0.0

    @pytest.mark.parametrize(
        ("provider", "base_url"),
        [
            ("openrouter", "https://openrouter.ai/api/v1"),
            ("groq", "https://api.groq.com/openai/v1"),
            ("ollama", "http://localhost:11434/v1"),
        ],
    )
    def test_named_providers_use_default_base_url(self, provider: str, base_url: str) -> None:
        settings = _settings(evaluation_provider=provider)
        with patch(
            "paper_eval.evaluation.factory.OpenAIClientAdapter", autospec=True
        ) as adapter_cls:
            EvaluationClientFactory.create(settings)

        assert adapter_cls.call_args.kwargs["base_url"] == base_url

    def test_ollama_defaults(self) -> None:
        settings = _settings(evaluation_provider="ollama")
        with patch(
            "paper_eval.evaluation.factory.OpenAIClientAdapter", autospec=True
        ) as adapter_cls:
            EvaluationClientFactory.create(settings)

        assert adapter_cls.call_args.kwargs["api_key"] == "ollama"
        assert adapter_cls.call_args.kwargs["timeout_seconds"] == 300

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown evaluation provider"):
            EvaluationClientFactory.create(_settings(evaluation_provider="mystery"))
