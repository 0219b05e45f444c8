"""
Test utilities: semantic comparison of rendered workbooks.

Philosophy:
- Compare MEANING, not bytes
- Values, merged ranges and sheet titles are what a reader sees
"""

from .xlsx_extract import SheetContent, XlsxContent, XlsxExtractor, extract_xlsx

__all__ = [
    "XlsxExtractor",
    "XlsxContent",
    "SheetContent",
    "extract_xlsx",
]
