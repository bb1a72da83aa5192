"""
Custom Exceptions
Error taxonomy for the content-generation workflow.
"""


class TrendwiseError(Exception):
    """Base exception for the workflow."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(TrendwiseError):
    """Invalid or missing configuration"""
    pass


class SourceError(TrendwiseError):
    """A single data-source call failed or timed out"""

    def __init__(self, message: str, source: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.source = source


class LLMError(TrendwiseError):
    """Generative model call failed"""

    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.provider = provider


class GenerationFailure(TrendwiseError):
    """Model output missing or unusable even after repair"""

    def __init__(self, message: str, topic: str = None, **kwargs):
        super().__init__(message, kwargs)
        self.topic = topic


class PersistenceFailure(TrendwiseError):
    """Article store read/write failed"""
    pass


class DuplicateSlugError(PersistenceFailure):
    """Slug uniqueness constraint rejected a save"""

    def __init__(self, slug: str):
        super().__init__(f"Article with slug '{slug}' already exists", {"slug": slug})
        self.slug = slug
