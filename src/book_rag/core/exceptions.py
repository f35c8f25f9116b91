"""Exception types for the evaluation pipeline.

Every failure raised by this package derives from ``EvalError``. Errors raised
while scoring one dimension of a multi-dimension judgment carry the name of
that dimension in ``dimension``.
"""


class EvalError(Exception):
    """Base exception for all evaluation pipeline errors."""

    def __init__(self, message: str, dimension: str | None = None):
        self.dimension = dimension
        super().__init__(message)


class ServiceError(EvalError):
    """Raised when an external call fails or returns a non-success response."""


class ParseError(EvalError):
    """Raised when model output lacks a recognizable directive or value."""


class ConfigurationError(EvalError):
    """Raised on caller misuse: bad sizes, empty corpora, invalid files."""


class EmptyDatasetError(ConfigurationError):
    """Raised when dataset generation accepted no question/answer pairs."""
