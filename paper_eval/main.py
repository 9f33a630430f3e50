import argparse
import asyncio
import sys
from pathlib import Path

from paper_eval.config.settings import Settings
from paper_eval.documents.models import DocumentHandle
from paper_eval.findings import FindingsExporter, extract_findings
from paper_eval.logging.logger import Log
from paper_eval.queue import build_queue, compare_documents
from paper_eval.queue.exceptions import QueueError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="paper-eval",
        description="Evaluate research papers against evidence quality guidelines.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="PDF, text or markdown files")
    parser.add_argument(
        "--findings-csv",
        type=Path,
        default=None,
        help="write the extracted key findings to this CSV file",
    )
    return parser.parse_args(argv)


async def run(settings: Settings, files: list[Path]) -> str:
    """Evaluate *files* as one batch and return the headline evaluation text."""
    queue = build_queue(settings)
    documents = [DocumentHandle.from_path(path) for path in files]
    outcome = await compare_documents(
        queue,
        documents,
        poll_interval=settings.queue_poll_interval_seconds,
        max_wait=settings.queue_max_wait_seconds,
    )
    if not outcome.success:
        raise QueueError(outcome.error or "Evaluation failed")
    return outcome.text or ""


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> queue -> evaluate -> print."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        text = asyncio.run(run(settings, args.files))
    except QueueError as exc:
        Log.error(f"Evaluation failed: {exc}")
        return 1

    print(text)
    if args.findings_csv is not None:
        findings = extract_findings(text)
        args.findings_csv.write_text(FindingsExporter().to_csv(findings), encoding="utf-8")
        Log.info(f"Wrote {len(findings)} findings to {args.findings_csv}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
