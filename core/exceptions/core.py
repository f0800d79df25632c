"""Vector Manager Core Exceptions - Core exception classes for error handling.

This module contains the exception hierarchy for the Vector Manager system. These
exceptions provide clear error categorization and enable proper error handling
throughout the retrieval pipeline.
"""

from typing import Optional, Any, Dict


class VectorManagerError(Exception):
    """Base exception for all Vector Manager errors.

    This is the root exception class that all other Vector Manager exceptions
    inherit from. It provides common functionality for error handling,
    context tracking, and debugging.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize Vector Manager error.

        Args:
            message: Human-readable error description
            context: Optional dictionary with error context (e.g., collection ids, hashes)
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return formatted error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message

    def add_context(self, key: str, value: Any) -> "VectorManagerError":
        """Add context information to the error."""
        self.context[key] = value
        return self


class ValidationError(VectorManagerError):
    """Raised when data validation fails.

    Configuration values that fail validation are clamped by the settings
    layer instead of raising; this exception surfaces for malformed domain
    objects (e.g. a chunk whose offsets break its invariant).
    """

    def __init__(
        self,
        field: str,
        value: Any,
        reason: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize validation error.

        Args:
            field: Name of the field that failed validation
            value: The invalid value
            reason: Description of why validation failed
            context: Optional additional context
        """
        message = f"Validation failed for field '{field}': {reason}"
        super().__init__(message, context)
        self.field = field
        self.value = value
        self.reason = reason


class EmbeddingError(VectorManagerError):
    """Raised when embedding operations fail outside the provider call itself."""

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize embedding error.

        Args:
            provider: Embedding provider name (e.g., "openai")
            model: Model name (e.g., "text-embedding-ada-002")
            operation: Operation that failed (e.g., "embed", "embed_batch")
            reason: Description of what went wrong
            context: Optional additional context
        """
        parts = []
        if provider:
            parts.append(f"provider={provider}")
        if model:
            parts.append(f"model={model}")
        if operation:
            parts.append(f"operation={operation}")

        prefix = f"Embedding error ({', '.join(parts)})" if parts else "Embedding error"
        message = f"{prefix}: {reason}" if reason else prefix

        super().__init__(message, context)
        self.provider = provider
        self.model = model
        self.operation = operation
        self.reason = reason


class DimensionMismatchError(VectorManagerError):
    """Raised when two vectors of unequal length are compared."""

    def __init__(
        self,
        expected: int,
        actual: int,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(f"Dimension mismatch: {expected} vs {actual}", context)
        self.expected = expected
        self.actual = actual


class VectorStoreError(VectorManagerError):
    """Raised when vector store operations fail.

    This exception is used for errors related to inserting, querying, listing
    or deleting records in a collection.
    """

    def __init__(
        self,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize vector store error.

        Args:
            operation: Store operation that failed (e.g., "insert", "query", "purge")
            collection: Collection involved in the operation
            reason: Description of what went wrong
            context: Optional additional context
        """
        parts = []
        if operation:
            parts.append(f"operation={operation}")
        if collection:
            parts.append(f"collection={collection}")

        prefix = f"Vector store error ({', '.join(parts)})" if parts else "Vector store error"
        message = f"{prefix}: {reason}" if reason else prefix

        super().__init__(message, context)
        self.operation = operation
        self.collection = collection
        self.reason = reason


class ConfigurationError(VectorManagerError):
    """Raised when configuration is missing or unusable.

    Out-of-range values are clamped rather than rejected; this exception is
    reserved for configuration that cannot be repaired, such as a custom
    endpoint kind without a URL.
    """

    def __init__(
        self,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize configuration error.

        Args:
            config_key: Configuration key that caused the error
            config_value: Invalid configuration value
            reason: Description of what went wrong
            context: Optional additional context
        """
        if config_key:
            message = f"Configuration error for '{config_key}': {reason}"
        else:
            message = f"Configuration error: {reason}" if reason else "Configuration error"

        super().__init__(message, context)
        self.config_key = config_key
        self.config_value = config_value
        self.reason = reason


class ProviderError(VectorManagerError):
    """Raised when external provider operations fail.

    This exception is used for non-success responses and transport failures
    from the embedding and rerank endpoints.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        service: Optional[str] = None,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize provider error.

        Args:
            provider: Provider name (e.g., "openai", "cohere")
            service: Service or endpoint that failed
            status_code: HTTP status code if applicable
            reason: Description of what went wrong
            context: Optional additional context
        """
        parts = []
        if provider:
            parts.append(f"provider={provider}")
        if service:
            parts.append(f"service={service}")
        if status_code:
            parts.append(f"status={status_code}")

        prefix = f"Provider error ({', '.join(parts)})" if parts else "Provider error"
        message = f"{prefix}: {reason}" if reason else prefix

        super().__init__(message, context)
        self.provider = provider
        self.service = service
        self.status_code = status_code
        self.reason = reason
