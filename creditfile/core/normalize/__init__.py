"""Normalization and entity resolution."""

from .engine import coerce_raw_data, infer_page_info, normalize

__all__ = ["coerce_raw_data", "infer_page_info", "normalize"]
