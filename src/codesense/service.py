"""
Caller-facing operations.

``CodeSenseService`` wires the prompt builders, the conversation driver and
the fallback policy together. Both operations always resolve to a populated
Response; only malformed caller input raises.
"""

import asyncio
import logging
from typing import Optional

from codesense.agent.driver import ConversationDriver
from codesense.agent.fallback import (
    chat_failure_response,
    configuration_missing_response,
    summary_failure_response,
)
from codesense.agent.models import DriverConfig
from codesense.config import Config, get_config
from codesense.prompts.builder import build_chat_prompt, build_summary_prompt
from codesense.providers.base import ModelBackend
from codesense.providers.manager import ProviderManager
from codesense.providers.models import Message, Response
from codesense.repository import RepositoryMetadata
from codesense.tools.file_content import ContentFetcher, FileContentTool
from codesense.tools.resolver import ToolInvocationResolver

logger = logging.getLogger(__name__)


class CodeSenseService:
    """Repository summaries and question answering over one model backend."""

    def __init__(
        self,
        config: Optional[Config] = None,
        backend: Optional[ModelBackend] = None,
        fetcher: Optional[ContentFetcher] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Configuration. Loaded with ``get_config()`` if not provided.
            backend: Model backend. A ProviderManager offering the file
                content tool is built from config if not provided.
            fetcher: File content source. Defaults to a GitHubClient.
        """
        self.config = config or get_config()
        limits = self.config.limits

        if fetcher is None:
            from codesense.github import GitHubClient

            fetcher = GitHubClient(self.config.github).fetch_content

        self.tool = FileContentTool(
            fetcher=fetcher,
            max_files=limits.max_files_per_round,
            max_content_length=limits.max_file_chars,
            fetch_timeout=limits.fetch_timeout,
        )
        self.backend = backend or ProviderManager(
            self.config.providers, tools=[self.tool.get_tool_definition()]
        )
        self.driver = ConversationDriver(
            self.backend,
            ToolInvocationResolver(self.tool),
            DriverConfig(backend_timeout=self.config.providers.timeout),
        )

    async def generate_summary(
        self,
        metadata: RepositoryMetadata,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Response:
        """
        Produce a Markdown analysis of a repository.

        Falls back to a metadata-only document when the model fails.
        """
        if not self.backend.is_configured():
            logger.warning("Model credential missing; skipping summary exchange")
            return configuration_missing_response()

        limits = self.config.limits
        prompt = build_summary_prompt(
            metadata,
            max_files=limits.max_files_per_round,
            max_entries=limits.summary_entries,
            max_languages=limits.max_languages,
        )

        logger.info(f"Generating summary for {metadata.full_name}")
        result = await self.driver.run([prompt], metadata.owner, metadata.repo, cancel_event)
        if result.success:
            return Response(text=result.text)

        return summary_failure_response(metadata, result.error)

    async def answer_question(
        self,
        metadata: RepositoryMetadata,
        prior_turns: list[Message],
        question: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Response:
        """Answer one chat question about a repository."""
        if not self.backend.is_configured():
            logger.warning("Model credential missing; skipping chat exchange")
            return configuration_missing_response()

        limits = self.config.limits
        conversation = build_chat_prompt(
            metadata,
            prior_turns,
            question,
            max_history_pairs=limits.max_history_pairs,
            max_files=limits.max_files_per_round,
            max_entries=limits.chat_entries,
            key_files=limits.chat_key_files,
            max_languages=limits.max_languages,
        )

        logger.info(f"Answering question about {metadata.full_name}")
        result = await self.driver.run(conversation, metadata.owner, metadata.repo, cancel_event)
        if result.success:
            return Response(text=result.text)

        return chat_failure_response(result.error)
