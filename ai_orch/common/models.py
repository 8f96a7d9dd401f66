from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single conversation turn. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ModelDescriptor(BaseModel):
    """Static catalog entry for one candidate model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Provider-specific model identifier.")
    provider: str = Field(description="Provider family; routing key into the provider pool.")
    label: str = Field(description="Display name.")
    priority: int = Field(description="Lower values are preferred.")


# --- API schemas ---


class ModelEntry(BaseModel):
    index: int
    id: str
    provider: str
    label: str
    priority: int
    current: bool = False


class ModelList(BaseModel):
    current_index: int
    data: List[ModelEntry]


class SetModelRequest(BaseModel):
    session_id: str
    index: int


class ChatInput(BaseModel):
    input: str


class ChatReply(BaseModel):
    session_id: str
    command: bool = False
    lines: List[str] = Field(default_factory=list)
    content: Optional[str] = None
    model: Optional[ModelDescriptor] = None
    exit: bool = False


class SessionSummary(BaseModel):
    id: str
    title: str


class RenameRequest(BaseModel):
    title: str
