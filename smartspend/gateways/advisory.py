"""
Advisory Gateway

Narrative text about the user's spending: a short list of insights for
the dashboard, and chat answers for the assistant panel.

CRITICAL BOUNDARIES:
- Reads a snapshot of the records. NEVER changes them.
- Always returns text. Any service failure becomes a fixed fallback
  message so the conversation stays usable.
- A missing API key is NOT a service failure: ConfigurationError
  propagates to the caller.
- No timeout. A hung call keeps the caller's spinner up.
"""

from typing import Optional, Sequence

import structlog
from pydantic import BaseModel, ConfigDict

from smartspend.gateways.base import GeminiGateway, records_to_json
from smartspend.models.receipt import ReceiptRecord


logger = structlog.get_logger(__name__)


INSIGHTS_EMPTY_FALLBACK = "No se pudieron generar insights."
INSIGHTS_ERROR_FALLBACK = "No se pudieron cargar los insights en este momento."
CHAT_EMPTY_FALLBACK = "Lo siento, no entendí eso."
CHAT_ERROR_FALLBACK = "Ups, tuve un problema conectando con mi cerebro digital."


def build_insights_prompt(records: Sequence[ReceiptRecord]) -> str:
    return (
        "Basado en estos datos de gastos:\n"
        f"{records_to_json(records)}\n\n"
        "Genera 3 insights o consejos financieros breves y útiles para el usuario. "
        "Usa formato Markdown. Sé amigable y directo."
    )


def build_system_instruction(records: Sequence[ReceiptRecord]) -> str:
    return (
        "Eres un asistente financiero personal amigable y experto. "
        f"Tienes acceso a los datos de gastos del usuario: {records_to_json(records)}. "
        "Responde preguntas sobre sus gastos, da consejos y ayuda con recordatorios. "
        "Sé conciso y útil."
    )

class AdvisoryReply(BaseModel):
    """
    Text to show plus whether the service actually answered.

    `ok` is False only when the call failed and `text` is the error
    fallback. An empty answer is a successful call with the empty fallback.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    ok: bool = True
    error: Optional[str] = None


class FinancialAdvisor(GeminiGateway):
    """
    Gemini-backed advisor.

    Both operations are safe to call repeatedly; they hold no state
    between calls. Overlapping calls are allowed and independent.
    """

    def _generation_config(self) -> dict:
        return {"temperature": self._get_settings().temperature}

    async def insights_reply(
        self,
        records: Sequence[ReceiptRecord],
    ) -> AdvisoryReply:
        """Three short Markdown tips about the given records, with the call outcome."""
        model = self._build_model(generation_config=self._generation_config())

        try:
            response = await model.generate_content_async(build_insights_prompt(records))
            text = response.text
        except Exception as e:
            logger.error("insights_failed", error=str(e), record_count=len(records))
            return AdvisoryReply(text=INSIGHTS_ERROR_FALLBACK, ok=False, error=str(e))

        logger.info("insights_generated", record_count=len(records))
        return AdvisoryReply(
            text=text.strip() if text and text.strip() else INSIGHTS_EMPTY_FALLBACK
        )

    async def generate_insights(
        self,
        records: Sequence[ReceiptRecord],
    ) -> str:
        """
        Three short Markdown tips about the given records.

        Returns a fallback sentence instead of raising on service failure.
        """
        return (await self.insights_reply(records)).text

    async def chat_reply(
        self,
        message: str,
        records: Sequence[ReceiptRecord],
        history: Optional[list[dict]] = None,
    ) -> AdvisoryReply:
        """
        Answer one chat turn with the records as context.

        Args:
            message: The user's new message
            records: Current record snapshot, embedded in the system instruction
            history: Prior turns as [{"role": "user"|"model", "parts": [text]}]
        """
        model = self._build_model(
            generation_config=self._generation_config(),
            system_instruction=build_system_instruction(records),
        )

        try:
            session = model.start_chat(history=list(history or []))
            response = await session.send_message_async(message)
            text = response.text
        except Exception as e:
            logger.error("chat_failed", error=str(e), history_length=len(history or []))
            return AdvisoryReply(text=CHAT_ERROR_FALLBACK, ok=False, error=str(e))

        logger.info("chat_answered", history_length=len(history or []))
        return AdvisoryReply(
            text=text.strip() if text and text.strip() else CHAT_EMPTY_FALLBACK
        )

    async def chat(
        self,
        message: str,
        records: Sequence[ReceiptRecord],
        history: Optional[list[dict]] = None,
    ) -> str:
        """The answer text, or a fallback sentence on service failure."""
        return (await self.chat_reply(message, records, history)).text
