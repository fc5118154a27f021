"""AI-assisted event extraction."""

from .extractor import AiEventExtractor, ExtractedEvent
from .tokenizer import count_tokens, truncate_to_tokens

__all__ = ["AiEventExtractor", "ExtractedEvent", "count_tokens", "truncate_to_tokens"]
