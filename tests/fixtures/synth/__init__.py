"""Synthetic PyMuPDF stand-ins and calendar builders for parser tests."""

from .calendars import capital_document, rural_document
from .pages import SyntheticDocument, SyntheticPage, span, text_document

__all__ = [
    "SyntheticDocument",
    "SyntheticPage",
    "span",
    "text_document",
    "capital_document",
    "rural_document",
]
