"""
Main Orchestrator for SmartSpend

This module ties the components together and defines the flows behind
each user action:
1. Upload (images → extraction → append to store)
2. Store management (clear, CSV export)
3. Assistant (insights, chat turns, quick actions)

DESIGN DECISION: Flows never hold session state. They take the current
AppState (or a piece of it) and return the next one, so the top-level
view stays the only owner. Every step is logged.
"""

from datetime import date
from typing import Optional, Sequence
from uuid import UUID

from smartspend.audit import SessionEventLogger, create_correlation_id
from smartspend.config import ConfigurationError, get_settings
from smartspend.export import export_filename, records_to_csv_bytes
from smartspend.gateways import (
    AdvisoryReply,
    EmptySelectionError,
    ExtractionError,
    FinancialAdvisor,
    ReceiptExtractor,
)
from smartspend.models.assistant import QUICK_ACTION_PROMPTS, Conversation, QuickAction
from smartspend.models.receipt import ImagePayload, ReceiptRecord
from smartspend.state import AppState, Theme, records_cleared, records_loaded


EXTRACTION_FAILED_MESSAGE = "Hubo un error analizando las boletas. Intenta nuevamente."

GREETINGS = {
    Theme.LIGHT: "¡Hola! Aquí estoy para ayudarte a aclarar tus finanzas.",
    Theme.SPACE: "¡Saludos viajero! Estoy listo para navegar tus datos.",
}


class UploadFlow:
    """
    Orchestrates the upload flow.

    Flow:
    1. Validate → at least one image selected (no call otherwise)
    2. Extract → one request to the extraction service
    3. Apply → append the batch to the store, show the dashboard

    On failure nothing is applied: the store is unchanged and the caller
    keeps the user's file selection for a retry.
    """

    def __init__(
        self,
        extractor: Optional[ReceiptExtractor] = None,
        event_logger: Optional[SessionEventLogger] = None,
    ):
        self._extractor = extractor or ReceiptExtractor()
        self._event_logger = event_logger or SessionEventLogger()

    async def submit(
        self,
        images: Sequence[ImagePayload],
        correlation_id: Optional[UUID] = None,
    ) -> list[ReceiptRecord]:
        """
        Extract records from the selected images.

        Raises:
            EmptySelectionError: nothing selected
            ConfigurationError: API key missing
            ExtractionError: the service failed; safe to retry
        """
        correlation_id = correlation_id or create_correlation_id()

        if not images:
            self._event_logger.log_upload_rejected("no images selected", correlation_id)
            raise EmptySelectionError("Por favor sube al menos una imagen.")

        self._event_logger.log_extraction_requested(len(images), correlation_id)

        try:
            records = await self._extractor.analyze_receipts(images)
        except ConfigurationError as e:
            self._event_logger.log_configuration_error(str(e), correlation_id)
            raise
        except ExtractionError as e:
            self._event_logger.log_extraction_failed(str(e), correlation_id)
            raise

        self._event_logger.log_extraction_completed(len(records), correlation_id)
        return records

    def apply(
        self,
        state: AppState,
        batch: Sequence[ReceiptRecord],
        correlation_id: Optional[UUID] = None,
    ) -> AppState:
        """Append a successful batch to the store."""
        new_state = records_loaded(state, batch)
        self._event_logger.log_records_appended(
            added=len(batch),
            store_size=len(new_state.store),
            correlation_id=correlation_id,
        )
        return new_state

    def clear(self, state: AppState) -> AppState:
        """
        Wipe every record.

        CRITICAL: Call only after the user explicitly confirmed.
        """
        discarded = len(state.store)
        new_state = records_cleared(state)
        self._event_logger.log_store_cleared(discarded)
        return new_state

    def build_export(
        self,
        state: AppState,
        today: Optional[date] = None,
    ) -> tuple[str, bytes]:
        """
        Render the CSV download without recording an export.

        Returns:
            (filename, csv_bytes)
        """
        filename = export_filename(today, prefix=get_settings().app.export_filename_prefix)
        return filename, records_to_csv_bytes(state.store.snapshot())

    def export_csv(
        self,
        state: AppState,
        today: Optional[date] = None,
    ) -> tuple[str, bytes]:
        """Render the CSV download and log the export."""
        filename, payload = self.build_export(state, today)
        self._event_logger.log_csv_exported(len(state.store), filename)
        return filename, payload


class AssistantFlow:
    """
    Orchestrates the assistant panel.

    The advisor always answers with text (falling back to a fixed apology
    on failure), so every method here returns the next Conversation and
    the panel stays usable after an error.
    """

    def __init__(
        self,
        advisor: Optional[FinancialAdvisor] = None,
        event_logger: Optional[SessionEventLogger] = None,
    ):
        self._advisor = advisor or FinancialAdvisor()
        self._event_logger = event_logger or SessionEventLogger()

    def _log_outcome(self, operation: str, reply: AdvisoryReply, record_count: int) -> None:
        if not reply.ok:
            self._event_logger.log_advisory_failed(operation, reply.error or reply.text)
        else:
            self._event_logger.log_advisory_completed(operation, record_count)

    def open_chat(self, conversation: Conversation, theme: Theme = Theme.LIGHT) -> Conversation:
        return conversation.open_chat(GREETINGS[Theme(theme)])

    async def send(
        self,
        conversation: Conversation,
        text: str,
        records: Sequence[ReceiptRecord],
    ) -> Conversation:
        """
        Add the user's message and the model's answer.

        Blank messages are ignored.
        """
        if not text.strip():
            return conversation

        history = conversation.history()
        conversation = conversation.with_user_message(text)

        reply = await self._advisor.chat_reply(text, records, history)
        self._log_outcome("chat", reply, len(records))
        return conversation.with_model_message(reply.text)

    async def quick_action(
        self,
        action: QuickAction,
        records: Sequence[ReceiptRecord],
    ) -> Conversation:
        """
        Start a fresh exchange from a canned prompt.

        The transcript is replaced by the prompt and its answer, and the
        model sees no earlier history.
        """
        prompt, placeholder = QUICK_ACTION_PROMPTS[QuickAction(action)]
        conversation = Conversation().with_pending(prompt, placeholder)

        reply = await self._advisor.chat_reply(prompt, records, history=[])
        self._log_outcome("chat", reply, len(records))
        return conversation.resolve_pending(reply.text)

    async def insights(self, records: Sequence[ReceiptRecord]) -> str:
        """Dashboard insights for the current snapshot."""
        reply = await self._advisor.insights_reply(records)
        self._log_outcome("insights", reply, len(records))
        return reply.text


def create_app_components(
    event_logger: Optional[SessionEventLogger] = None,
) -> tuple[UploadFlow, AssistantFlow, SessionEventLogger]:
    """
    Factory function to create all application components.

    Both flows share one session event logger.

    Returns:
        (upload_flow, assistant_flow, event_logger)
    """
    event_logger = event_logger or SessionEventLogger()

    upload_flow = UploadFlow(
        extractor=ReceiptExtractor(),
        event_logger=event_logger,
    )
    assistant_flow = AssistantFlow(
        advisor=FinancialAdvisor(),
        event_logger=event_logger,
    )

    return upload_flow, assistant_flow, event_logger
