import logging
from typing import Optional

logger = logging.getLogger(__name__)


def create_pdf(html_content: str) -> Optional[bytes]:
    """Renders a complete HTML document into PDF bytes using WeasyPrint.

    Returns None on failure (callers should handle gracefully).
    """
    try:
        # WeasyPrint loads Pango through cffi at import time
        from weasyprint import HTML

        pdf_bytes = HTML(string=html_content, base_url=".").write_pdf()
        logger.info("PDF rendered (%d bytes)", len(pdf_bytes or b""))
        return pdf_bytes
    except Exception:
        logger.exception("Error during PDF generation")
        return None
