"""
Exception types raised by the ingestion package.

Only extraction problems and cancellation escape the pipeline; every
stage after extraction degrades to a default value instead of raising.
"""


class IngestionError(Exception):
    """Base exception for all ingestion errors."""

    pass


class ExtractionError(IngestionError):
    """
    The uploaded file yielded no usable text.

    Raised for unsupported formats, oversized uploads, unreadable or
    image-only PDFs, and text shorter than the minimum length threshold.
    The pipeline aborts before structuring when this is raised.
    """

    pass


class IngestionCancelled(IngestionError):
    """The caller aborted the ingestion between two stages."""

    pass


class ConfigurationError(IngestionError):
    """Configuration file or environment failed validation."""

    pass


class ModelClientError(Exception):
    """
    Transport or model failure from the remote summarization service.

    Never escapes the summarizer: it is converted into a provider
    failure and the next summary provider is tried.
    """

    pass
