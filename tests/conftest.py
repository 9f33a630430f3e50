import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def render_pdf(pages: list[list[str]]) -> bytes:
    """Render one PDF page per entry, one drawn line per string."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    return render_pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    return render_pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """A valid PDF with a single blank page."""
    return render_pdf([[]])


@pytest.fixture()
def paper_pdf_bytes() -> bytes:
    """A two-page paper with a title, a DOI and an abstract."""
    return render_pdf(
        [
            [
                "Effects of exercise on sleep quality in adults",
                "doi: 10.1234/sleep.2021",
                "Abstract: A randomized trial of 120 adults.",
            ],
            ["Introduction", "Sleep is important for health."],
        ]
    )
