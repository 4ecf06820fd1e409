"""LLM analysis module."""

from .analyze import (
    PyramidParseError,
    analyze_document,
    clean_model_response,
    has_api_key,
    parse_model_response,
)
from .tokens import truncate_to_token_limit
from . import prompts

__all__ = [
    'PyramidParseError',
    'analyze_document',
    'clean_model_response',
    'has_api_key',
    'parse_model_response',
    'truncate_to_token_limit',
    'prompts',
]
