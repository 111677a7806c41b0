"""
Fallback policy for CodeSense.

Turns a failed exchange into a populated Response. Every failure class is
terminal; nothing here retries.
"""

import logging

from codesense.prompts.builder import summary_context
from codesense.providers.exceptions import (
    ConfigurationMissingError,
    ExchangeCancelledError,
    ProviderError,
)
from codesense.providers.models import Response
from codesense.repository import RepositoryMetadata

logger = logging.getLogger(__name__)

CONFIGURATION_MISSING_TEXT = "Model API key not configured."
CONFIGURATION_MISSING_ERROR = "API key missing"
CANCELLED_TEXT = "The request was cancelled before the model answered."
CANCELLED_ERROR = "Exchange cancelled"


def configuration_missing_response() -> Response:
    """Response returned when no model credential is configured."""
    return Response(text=CONFIGURATION_MISSING_TEXT, error=CONFIGURATION_MISSING_ERROR)


def cancelled_response() -> Response:
    """Response returned when the caller cancelled the exchange."""
    return Response(text=CANCELLED_TEXT, error=CANCELLED_ERROR)


def fallback_summary(metadata: RepositoryMetadata, reason: str | None = None) -> Response:
    """
    Build a deterministic Markdown summary from already-known metadata.

    Args:
        metadata: Repository metadata.
        reason: Why the model summary could not be produced.

    Returns:
        Response with the metadata document and ``error`` describing the fallback.
    """
    info = summary_context(metadata)
    lines = [f"# Repository Analysis: {info['name'] or 'N/A'}"]
    if reason:
        lines.append(f"*Fallback triggered: {reason}*")
        lines.append("")
    lines.extend([
        "## Overview",
        info["description"] or "No description available.",
        f"This is a {info['primaryLanguage'] or 'multi-language'} project.",
        f"Stars: {info['stars'] or 0}, Forks: {info['forks'] or 0}, "
        f"Open Issues: {info['openIssues'] if info['openIssues'] is not None else 'N/A'}",
        f"Topics: {', '.join(info['topics']) or 'N/A'}",
        "## Fallback Note",
        "This is a basic summary based on metadata. For a more detailed AI analysis, "
        "please try again.",
    ])

    error = "Used fallback summary" + (f": {reason}" if reason else "")
    return Response(text="\n".join(lines).strip(), error=error)


def summary_failure_response(metadata: RepositoryMetadata, error: ProviderError) -> Response:
    """Map a failed summary exchange to its Response."""
    if isinstance(error, ConfigurationMissingError):
        return configuration_missing_response()
    if isinstance(error, ExchangeCancelledError):
        return cancelled_response()

    logger.warning(f"Falling back to metadata summary for {metadata.full_name}: {error}")
    return fallback_summary(metadata, f"Error generating summary: {error}")


def chat_failure_response(error: ProviderError) -> Response:
    """Map a failed chat exchange to its Response."""
    if isinstance(error, ConfigurationMissingError):
        return configuration_missing_response()
    if isinstance(error, ExchangeCancelledError):
        return cancelled_response()

    message = str(error)
    return Response(text=f"Sorry, an error occurred: {message}", error=message)
