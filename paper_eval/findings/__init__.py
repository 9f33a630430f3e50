from paper_eval.findings.exporter import FindingsExporter
from paper_eval.findings.models import Finding
from paper_eval.findings.segmenter import extract_findings

__all__ = ["Finding", "FindingsExporter", "extract_findings"]
