"""
Pydantic models for the Responses API wire format.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class InputContent(BaseModel):
    """Content piece of an input message"""
    type: str = "input_text"
    text: str


class InputMessage(BaseModel):
    """Input message"""
    role: str
    content: List[InputContent]


class ChatRequest(BaseModel):
    """Responses API request body"""
    model: str
    input: List[InputMessage]
    instructions: str
    stream: bool
    store: bool = False


class OutputContent(BaseModel):
    """Content piece of an output message"""
    type: str
    text: Optional[str] = None


class OutputMessage(BaseModel):
    """Output item (reasoning items carry no content)"""
    role: Optional[str] = None
    content: List[OutputContent] = Field(default_factory=list)


class ResponsesReply(BaseModel):
    """Structured Responses API reply"""
    output: List[OutputMessage] = Field(default_factory=list)


class StreamEvent(BaseModel):
    """One decoded event-stream frame"""
    type: str
    delta: Optional[str] = None
    response: Optional[ResponsesReply] = None
