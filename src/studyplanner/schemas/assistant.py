"""Request and response bodies for the assistant endpoint."""

from pydantic import BaseModel, Field


class MessageRequest(BaseModel):
    text: str = Field(default="", max_length=2000)


class MessageResponse(BaseModel):
    reply: str


__all__ = ["MessageRequest", "MessageResponse"]
