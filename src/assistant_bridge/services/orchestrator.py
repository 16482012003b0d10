"""Run orchestration.

The RunOrchestrator drives one prompt through the remote run lifecycle:

    started -> polling -> {requires_action <-> polling}
            -> {completed | failed | expired | cancelled | incomplete}

The remote service has no push notifications, so the run is polled on a fixed
interval. While the run requires action, every pending tool call of the batch
is dispatched and the outputs are submitted together; a partially answered
batch is not a valid protocol state.

The timeout is measured on the monotonic wall clock from the moment the run
was started. When it is exceeded the call fails with RunTimedOut whatever the
remote state is. The remote run is not cancelled.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable

from assistant_bridge.capabilities.dispatcher import CapabilityDispatcher
from assistant_bridge.errors import RunFailed, RunTimedOut
from assistant_bridge.remote.client import AssistantsClient
from assistant_bridge.remote.types import AgentIdentity, RunState, RunStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.5


class RunOrchestrator:
    """Posts a prompt and drives the resulting run to a terminal state.

    Attributes:
        client: Client for the remote service
        dispatcher: Dispatcher answering tool calls
        agent: Identity of the remote agent to run
        timeout: Seconds a single prompt may take
        poll_interval: Seconds to wait between status polls
    """

    def __init__(
        self,
        client: AssistantsClient,
        dispatcher: CapabilityDispatcher,
        agent: AgentIdentity,
        timeout: float,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.client = client
        self.dispatcher = dispatcher
        self.agent = agent
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    async def run(self, thread_id: str, prompt: str) -> str | None:
        """Send a prompt on a thread and wait for the assistant's reply.

        Args:
            thread_id: The remote thread to post on
            prompt: The user prompt

        Returns:
            The text of the latest assistant message, or None if the run
            completed without one

        Raises:
            RunTimedOut: If the run does not finish within the timeout
            RunFailed: If the run ends failed, expired, cancelled or incomplete
            TransportFailed: If any remote call fails
        """
        await self.client.post_message(thread_id, prompt)
        run_id = await self.client.create_run(thread_id, self.agent.remote_agent_id)
        started = self._clock()
        logger.debug(f"Started run {run_id} on thread {thread_id}")

        polls = 0
        while True:
            await self._sleep(self.poll_interval)
            status = await self.client.get_run(thread_id, run_id)
            polls += 1

            elapsed = self._clock() - started
            if elapsed > self.timeout:
                logger.warning(
                    f"Run {run_id} timed out after {elapsed:.1f}s ({polls} polls), "
                    f"last status: {status.status}"
                )
                raise RunTimedOut(
                    f"Timed out waiting for run to complete after {self.timeout}s",
                    run_id=run_id,
                    timeout=self.timeout,
                )

            if status.state is RunState.NEEDS_CAPABILITY_EXECUTION:
                await self._answer_tool_calls(thread_id, run_id, status)
            elif status.state is RunState.COMPLETED:
                logger.debug(f"Run {run_id} completed after {polls} polls")
                return await self._latest_assistant_reply(thread_id)
            elif status.state.is_failure:
                detail = f": {status.last_error}" if status.last_error else ""
                raise RunFailed(
                    f"Run {run_id} ended with status {status.status}{detail}",
                    status=status.status,
                    last_error=status.last_error,
                )

    async def _answer_tool_calls(self, thread_id: str, run_id: str, status: RunStatus) -> None:
        calls = status.pending_calls
        if not calls:
            logger.warning(f"Run {run_id} requires action but has no tool calls")
            return

        outputs = await self.dispatcher.dispatch_batch(calls)
        await self.client.submit_tool_outputs(thread_id, run_id, outputs)
        logger.debug(f"Submitted {len(outputs)} tool outputs for run {run_id}")

    async def _latest_assistant_reply(self, thread_id: str) -> str | None:
        for message in await self.client.list_messages(thread_id):
            if message.role == "assistant" and message.text is not None:
                return message.text
        logger.warning(f"No assistant reply found on thread {thread_id}")
        return None
