"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that replace the
remote assistants service with a scripted mock.
"""

from unittest.mock import AsyncMock, patch

import pytest

from assistant_bridge.remote import RunState, RunStatus, ThreadMessage


def run_status(state: str, calls=None, last_error=None) -> RunStatus:
    return RunStatus(
        run_id="run_1",
        state=RunState.from_wire(state),
        status=state,
        pending_calls=calls or [],
        last_error=last_error,
    )


@pytest.fixture(autouse=True)
def mock_assistants_client():
    """Mock AssistantsClient for all integration tests.

    This fixture patches the AssistantsClient class before the app is
    created, ensuring the lifespan uses our mock instead of a real client.
    Runs complete on the first poll with the reply "5" unless a test
    scripts something else.
    """
    with patch("assistant_bridge.app.AssistantsClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.base_url = "http://remote.test/v1"
        mock_instance.check_connection.return_value = True
        mock_instance.create_thread.side_effect = [f"thread_{i}" for i in range(1, 20)]
        mock_instance.create_run.return_value = "run_1"
        mock_instance.get_run.return_value = run_status("completed")
        mock_instance.list_messages.return_value = [
            ThreadMessage(message_id="msg_2", role="assistant", text="5"),
            ThreadMessage(message_id="msg_1", role="user", text="What is 2 + 3?"),
        ]
        mock_instance.delete_thread.return_value = True

        mock_client_class.return_value = mock_instance

        yield mock_instance
