from paper_eval.citations.normalizer import CitationNormalizer

__all__ = ["CitationNormalizer"]
