"""Generation service client and LLM output parsing helpers."""

from .generation import (
    GenerationError,
    GenerationService,
    OpenAIGenerationService,
    is_generation_available,
)
from .parsing import extract_json_object, parse_json_object

__all__ = [
    "GenerationError",
    "GenerationService",
    "OpenAIGenerationService",
    "is_generation_available",
    "extract_json_object",
    "parse_json_object",
]
