"""
PDF processing for Cardwise.
Extracts page text from exam PDFs so the bulk extractor can read them.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

try:
    import fitz  # PyMuPDF

    PYMUPDF_AVAILABLE = True
except ImportError:
    PYMUPDF_AVAILABLE = False

logger = logging.getLogger(__name__)


class PDFExtractionError(Exception):
    """Raised when a PDF cannot be opened or read."""
    pass


@dataclass
class PDFPage:
    """Represents a single page from a PDF."""

    page_number: int
    text: str


@dataclass
class PDFContent:
    """Complete PDF text extraction."""

    file_path: Path
    total_pages: int
    pages: List[PDFPage]
    metadata: Dict[str, Any]

    @property
    def full_text(self) -> str:
        """All page texts, one page per line block."""
        return "\n".join(page.text for page in self.pages)


class PDFProcessor:
    """Processes PDF files to extract their text."""

    def __init__(self):
        """Initialize PDF processor."""
        if not PYMUPDF_AVAILABLE:
            raise ImportError("PyMuPDF is required. Install: pip install pymupdf")

    def process_pdf(self, pdf_path: Path) -> PDFContent:
        """Process a PDF file and extract the text of every page.

        Args:
            pdf_path: Path to PDF file

        Returns:
            PDFContent with extracted information
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF not found: {pdf_path}")

        try:
            doc = fitz.open(pdf_path)
        except Exception as e:
            raise PDFExtractionError(f"Cannot open {pdf_path.name}: {e}") from e

        try:
            pages = [
                PDFPage(page_number=page_num + 1, text=doc[page_num].get_text())
                for page_num in range(len(doc))
            ]
            metadata = doc.metadata or {}
        except Exception as e:
            raise PDFExtractionError(f"Cannot read {pdf_path.name}: {e}") from e
        finally:
            doc.close()

        logger.info(f"Read {len(pages)} pages from {pdf_path.name}")
        return PDFContent(
            file_path=pdf_path, total_pages=len(pages), pages=pages, metadata=metadata
        )

    def extract_text(self, pdf_path: Path) -> str:
        """Extract the full text of a PDF.

        Args:
            pdf_path: Path to PDF file

        Returns:
            Text of all pages joined by newlines
        """
        content = self.process_pdf(pdf_path)
        if self.is_scanned(content):
            logger.warning(
                f"{Path(pdf_path).name} has almost no text layer; it may be a scanned PDF"
            )
        return content.full_text

    @staticmethod
    def is_scanned(content: PDFContent, sample_pages: int = 3) -> bool:
        """Detect if PDF is scanned (image-based) or digital (text-based).

        Args:
            content: Extracted PDF content
            sample_pages: Number of pages to sample

        Returns:
            True if PDF appears to be scanned (no usable text)
        """
        sampled = content.pages[:sample_pages]
        if not sampled:
            return True

        text_chars = sum(len(page.text.strip()) for page in sampled)
        # Less than 100 chars/page = scanned
        return text_chars / len(sampled) < 100
