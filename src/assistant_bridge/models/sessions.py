"""Pydantic models for session API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field


class SessionResponse(BaseModel):
    """Response model for a single session."""

    session_id: str
    created_at: str
    updated_at: str
    prompt_count: int
    capabilities: list[str] = Field(
        default_factory=list, description="Capabilities available in this session"
    )


class SessionListResponse(BaseModel):
    """Response model for listing sessions."""

    sessions: list[SessionResponse]


class PromptRequest(BaseModel):
    """Request body for sending a prompt to a session."""

    prompt: str = Field(..., min_length=1, description="The user prompt to send")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"prompt": "What is 2 + 3?"},
            ]
        }
    )


class PromptResponse(BaseModel):
    """Response body with the agent's reply."""

    session_id: str
    reply: str | None = Field(
        default=None,
        description="The agent's reply; null if the run completed without a text reply",
    )
