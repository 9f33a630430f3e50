from pathlib import Path

import pytest

from paper_eval.config.settings import Settings


@pytest.fixture()
def example_settings() -> Settings:
    """Settings wired to the offline example client with fast polling."""
    return Settings(
        evaluation_provider="example",
        queue_poll_interval_seconds=0.01,
        queue_max_wait_seconds=10.0,
    )


@pytest.fixture()
def text_papers(tmp_path: Path) -> list[Path]:
    first = tmp_path / "exercise.txt"
    first.write_text(
        "Effects of exercise on sleep quality in adults\n"
        "doi: 10.1234/sleep.2021\n"
        "Abstract: A randomized trial of 120 adults.\nIntroduction\n",
        encoding="utf-8",
    )
    second = tmp_path / "diet.md"
    second.write_text(
        "# Dietary sugar and sleep latency in students\n"
        "https://doi.org/10.5555/diet-7\n",
        encoding="utf-8",
    )
    return [first, second]


@pytest.fixture()
def pdf_paper(tmp_path: Path, paper_pdf_bytes: bytes) -> Path:
    path = tmp_path / "exercise.pdf"
    path.write_bytes(paper_pdf_bytes)
    return path
