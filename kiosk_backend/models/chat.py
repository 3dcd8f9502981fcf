"""
Chat completion data models
"""
from typing import Any, List

from pydantic import BaseModel, ConfigDict


class ChatExchange(BaseModel):
    """
    Conversation forwarded to the completion provider

    Messages are kept exactly as the caller sent them so that every key
    reaches the provider untouched and in order.
    """

    model_config = ConfigDict(extra="ignore")

    messages: List[Any]
    model: str
    temperature: float


class CompletionResult(BaseModel):
    """Raw text of the provider's top choice"""
    content: str = ""
