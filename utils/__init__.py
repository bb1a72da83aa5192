"""
Utils Module
Logging and exception helpers
"""
from .logger import configure_logging
from .exceptions import (
    TrendwiseError,
    ConfigurationError,
    SourceError,
    LLMError,
    GenerationFailure,
    PersistenceFailure,
    DuplicateSlugError,
)

__all__ = [
    "configure_logging",
    "TrendwiseError",
    "ConfigurationError",
    "SourceError",
    "LLMError",
    "GenerationFailure",
    "PersistenceFailure",
    "DuplicateSlugError",
]
