"""
Assistant Models

The conversation transcript and the assistant panel mode. Every change
returns a new Conversation; the owner swaps it into the app state.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Who wrote a transcript entry. Names match the Gemini chat roles."""
    USER = "user"
    MODEL = "model"


class AssistantMode(str, Enum):
    """What the assistant panel is showing."""
    IDLE = "IDLE"
    MENU = "MENU"
    CHAT = "CHAT"


class QuickAction(str, Enum):
    """Canned menu entries that start a conversation with a fixed prompt."""
    DASHBOARD_ANALYSIS = "dashboard_analysis"
    ADVICE = "advice"


QUICK_ACTION_PROMPTS: dict[QuickAction, tuple[str, str]] = {
    # action: (user prompt, placeholder shown while waiting)
    QuickAction.DASHBOARD_ANALYSIS: (
        "Explícame mi dashboard actual y dame un resumen ejecutivo.",
        "Analizando tu dashboard...",
    ),
    QuickAction.ADVICE: (
        "Quiero un dashboard que entienda mis hábitos. "
        "¿Qué opinas de mis gastos recientes?",
        "Revisando tus hábitos...",
    ),
}


class ChatMessage(BaseModel):
    """One transcript entry."""
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    text: str

    def to_history_entry(self) -> dict:
        """Gemini chat history format."""
        return {"role": self.role.value, "parts": [self.text]}


class Conversation(BaseModel):
    """
    Assistant transcript plus panel mode.

    A pending placeholder (e.g. "Analizando tu dashboard...") is a model
    message that stands in for a response still in flight. It is never sent
    back to the model as history and is replaced when the response lands.
    """
    model_config = ConfigDict(frozen=True)

    mode: AssistantMode = AssistantMode.MENU
    messages: tuple[ChatMessage, ...] = ()
    pending: Optional[str] = Field(
        default=None,
        description="Text of the placeholder message, if one is showing"
    )

    def open_chat(self, greeting: str) -> "Conversation":
        return Conversation(
            mode=AssistantMode.CHAT,
            messages=(ChatMessage(role=ChatRole.MODEL, text=greeting),),
        )

    def with_user_message(self, text: str) -> "Conversation":
        return self.model_copy(update={
            "mode": AssistantMode.CHAT,
            "messages": self.messages + (ChatMessage(role=ChatRole.USER, text=text),),
        })

    def with_model_message(self, text: str) -> "Conversation":
        return self.model_copy(update={
            "messages": self.messages + (ChatMessage(role=ChatRole.MODEL, text=text),),
        })

    def with_pending(self, prompt: str, placeholder: str) -> "Conversation":
        """Start a fresh exchange: user prompt followed by a placeholder."""
        return Conversation(
            mode=AssistantMode.CHAT,
            messages=(
                ChatMessage(role=ChatRole.USER, text=prompt),
                ChatMessage(role=ChatRole.MODEL, text=placeholder),
            ),
            pending=placeholder,
        )

    def resolve_pending(self, text: str) -> "Conversation":
        """Replace the placeholder with the real response."""
        if self.pending is None:
            return self.with_model_message(text)
        messages = list(self.messages)
        for index in range(len(messages) - 1, -1, -1):
            message = messages[index]
            if message.role == ChatRole.MODEL and message.text == self.pending:
                del messages[index]
                break
        messages.append(ChatMessage(role=ChatRole.MODEL, text=text))
        return self.model_copy(update={"messages": tuple(messages), "pending": None})

    def history(self) -> list[dict]:
        """Transcript as Gemini history, without the pending placeholder."""
        return [
            message.to_history_entry()
            for message in self.messages
            if not (
                self.pending is not None
                and message.role == ChatRole.MODEL
                and message.text == self.pending
            )
        ]

    def back_to_menu(self) -> "Conversation":
        return self.model_copy(update={"mode": AssistantMode.MENU})

    def reset(self) -> "Conversation":
        return Conversation()
