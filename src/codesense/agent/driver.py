"""Conversation driver: one exchange with at most one tool round."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, Optional, TypeVar

from codesense.agent.models import (
    TRANSITIONS,
    DriverConfig,
    DriverState,
    ExchangeResult,
)
from codesense.agent.parser import ToolCallParser
from codesense.providers.base import ModelBackend
from codesense.providers.exceptions import (
    BackendEmptyResponseError,
    BackendUnavailableError,
    ExchangeCancelledError,
    FailureType,
    ProviderError,
)
from codesense.providers.models import Message, Role
from codesense.tools.resolver import ToolInvocationResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConversationDriver:
    """Drives one exchange with the model backend.

    State machine:
    1. INITIAL: send the conversation with tool calling enabled
    2. No tool calls in the reply: FINAL with its text
    3. Tool calls: AWAITING_TOOL, resolve them, append the tool message and
       send again with tool calling disabled; FINAL with that reply's text
    4. Any unusable reply or backend failure: FAILED

    Tool calling is honoured once per exchange, so at most two backend
    calls are ever made. Tool calls in the second reply are ignored.
    """

    def __init__(
        self,
        backend: ModelBackend,
        resolver: ToolInvocationResolver,
        config: Optional[DriverConfig] = None,
    ):
        """Initialize the driver.

        Args:
            backend: Model backend to send conversations to
            resolver: Resolver for the file content tool
            config: Deadlines for backend calls
        """
        self.backend = backend
        self.resolver = resolver
        self.config = config or DriverConfig()
        self.parser = ToolCallParser()

    async def run(
        self,
        conversation: list[Message],
        owner: str,
        repo: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ExchangeResult:
        """Run one exchange.

        Args:
            conversation: Opening messages; must start with a requester message
            owner: Repository owner, passed to the fetcher
            repo: Repository name, passed to the fetcher
            cancel_event: Set by the caller to abandon the exchange

        Returns:
            ExchangeResult in FINAL or FAILED state

        Raises:
            ValueError: If the conversation is empty or does not start with a
                requester message
        """
        if not conversation or conversation[0].role != Role.REQUESTER:
            raise ValueError("A conversation must start with a requester message")

        log: list[Message] = list(conversation)
        result = ExchangeResult(
            state=DriverState.INITIAL,
            text="",
            conversation=log,
            states=[DriverState.INITIAL],
        )

        try:
            reply = await self._send(log, result, tools_enabled=True, cancel_event=cancel_event)
            log.append(reply)

            tool_calls = self.parser.parse_tool_calls(reply)
            if tool_calls:
                self._transition(result, DriverState.AWAITING_TOOL)
                logger.info(f"Model requested {len(tool_calls)} tool call(s)")

                result_part = await self._guard(
                    self.resolver.resolve(tool_calls, owner, repo),
                    cancel_event,
                    timeout=None,
                )
                if result_part is None:
                    logger.warning("No recognised tool call; answering from the first reply")
                else:
                    log.append(Message.tool(result_part))
                    reply = await self._send(
                        log, result, tools_enabled=False, cancel_event=cancel_event
                    )
                    log.append(reply)
                    if self.parser.has_tool_calls(reply):
                        logger.warning("Ignoring tool calls in the final reply")

            text = self.parser.extract_text_content(reply)
            if not text:
                raise BackendEmptyResponseError("AI response was empty.")

            result.text = text
            self._transition(result, DriverState.FINAL)
            return result

        except ProviderError as e:
            logger.warning(f"Exchange failed with {e.failure_type.value}: {e}")
            result.error = e
            self._transition(result, DriverState.FAILED)
            return result

    def _transition(self, result: ExchangeResult, state: DriverState) -> None:
        if state not in TRANSITIONS[result.state]:
            raise RuntimeError(f"Illegal transition {result.state.value} -> {state.value}")
        logger.info(f"Exchange state: {result.state.value} -> {state.value}")
        result.state = state
        result.states.append(state)

    async def _send(
        self,
        log: list[Message],
        result: ExchangeResult,
        tools_enabled: bool,
        cancel_event: Optional[asyncio.Event],
    ) -> Message:
        """Make one backend call under the configured deadline."""
        if cancel_event is not None and cancel_event.is_set():
            raise ExchangeCancelledError("Exchange cancelled")

        result.backend_calls += 1
        logger.info(
            f"Backend call {result.backend_calls} "
            f"(tools={'enabled' if tools_enabled else 'disabled'})"
        )

        try:
            return await self._guard(
                self.backend.send(list(log), tools_enabled),
                cancel_event,
                timeout=self.config.backend_timeout,
            )
        except asyncio.TimeoutError as e:
            raise BackendUnavailableError(
                f"Model call timed out after {self.config.backend_timeout}s",
                failure_type=FailureType.TIMEOUT,
            ) from e
        except ProviderError:
            raise
        except Exception as e:
            raise BackendUnavailableError(str(e)) from e

    async def _guard(
        self,
        awaitable: Awaitable[T],
        cancel_event: Optional[asyncio.Event],
        timeout: Optional[float],
    ) -> T:
        """Await ``awaitable`` unless the deadline passes or the exchange is cancelled.

        The pending work is cancelled in either case.

        Raises:
            asyncio.TimeoutError: If the deadline passes first
            ExchangeCancelledError: If ``cancel_event`` is set first
        """
        task: asyncio.Future[T] = asyncio.ensure_future(awaitable)
        waiters: set[asyncio.Future[Any]] = {task}
        watcher: Optional[asyncio.Future[Any]] = None
        if cancel_event is not None:
            watcher = asyncio.ensure_future(cancel_event.wait())
            waiters.add(watcher)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
            if task in done:
                return task.result()

            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            if cancel_event is not None and cancel_event.is_set():
                raise ExchangeCancelledError("Exchange cancelled")
            raise asyncio.TimeoutError()
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()
