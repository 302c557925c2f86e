"""Tests for the advisory gateway (insights and chat)."""

import json
from unittest.mock import patch

import pytest

from smartspend.config import ConfigurationError
from smartspend.gateways import (
    CHAT_EMPTY_FALLBACK,
    CHAT_ERROR_FALLBACK,
    INSIGHTS_EMPTY_FALLBACK,
    INSIGHTS_ERROR_FALLBACK,
    AdvisoryReply,
    FinancialAdvisor,
    records_to_json,
)
from smartspend.gateways.advisory import build_insights_prompt, build_system_instruction


class TestPrompts:
    """Records are embedded as JSON."""

    def test_records_to_json(self, sample_records):
        payload = json.loads(records_to_json(sample_records))
        assert payload[0] == {
            "merchant": "Jumbo",
            "date": "2024-01-02",
            "total": 25.5,
            "category": "Comida",
            "description": None,
        }

    def test_records_to_json_keeps_accents(self, make_record):
        assert "Categoría" in records_to_json((make_record(category="Categoría"),))

    def test_insights_prompt_embeds_records(self, sample_records):
        prompt = build_insights_prompt(sample_records)
        assert records_to_json(sample_records) in prompt
        assert "3 insights" in prompt

    def test_system_instruction_embeds_records(self, sample_records):
        assert records_to_json(sample_records) in build_system_instruction(sample_records)


class TestGenerateInsights:
    """Dashboard insights."""

    @pytest.mark.asyncio
    async def test_returns_model_text(self, sample_records, gemini_settings, fake_model, make_response):
        fake_model.generate_content_async.return_value = make_response("- Gasta menos\n")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model) as build:
            text = await advisor.generate_insights(sample_records)

        assert text == "- Gasta menos"
        assert build.call_args.kwargs["generation_config"] == {"temperature": 0.3}

    @pytest.mark.asyncio
    async def test_empty_answer_falls_back(self, sample_records, gemini_settings, fake_model, make_response):
        fake_model.generate_content_async.return_value = make_response("  ")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            assert await advisor.generate_insights(sample_records) == INSIGHTS_EMPTY_FALLBACK

    @pytest.mark.asyncio
    async def test_service_failure_falls_back(self, sample_records, gemini_settings, fake_model):
        fake_model.generate_content_async.side_effect = RuntimeError("503")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            assert await advisor.generate_insights(sample_records) == INSIGHTS_ERROR_FALLBACK

    @pytest.mark.asyncio
    async def test_reply_reports_empty_answer_as_success(self, sample_records, gemini_settings, fake_model, make_response):
        fake_model.generate_content_async.return_value = make_response("")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            reply = await advisor.insights_reply(sample_records)

        assert reply == AdvisoryReply(text=INSIGHTS_EMPTY_FALLBACK, ok=True)

    @pytest.mark.asyncio
    async def test_reply_reports_service_failure(self, sample_records, gemini_settings, fake_model):
        fake_model.generate_content_async.side_effect = RuntimeError("503")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            reply = await advisor.insights_reply(sample_records)

        assert reply == AdvisoryReply(text=INSIGHTS_ERROR_FALLBACK, ok=False, error="503")


class TestChat:
    """Chat turns."""

    @pytest.mark.asyncio
    async def test_passes_history_and_message(self, sample_records, gemini_settings, fake_model, make_response):
        session = fake_model.start_chat.return_value
        session.send_message_async.return_value = make_response("Gastaste $67.50")
        history = [
            {"role": "model", "parts": ["Hola"]},
            {"role": "user", "parts": ["¿Y ayer?"]},
            {"role": "model", "parts": ["Nada"]},
        ]
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model) as build:
            reply = await advisor.chat("¿Cuánto gasté?", sample_records, history)

        assert reply == "Gastaste $67.50"
        fake_model.start_chat.assert_called_once_with(history=history)
        session.send_message_async.assert_awaited_once_with("¿Cuánto gasté?")
        assert build.call_args.kwargs["system_instruction"] == build_system_instruction(sample_records)

    @pytest.mark.asyncio
    async def test_no_history(self, sample_records, gemini_settings, fake_model, make_response):
        fake_model.start_chat.return_value.send_message_async.return_value = make_response("ok")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            await advisor.chat("hola", sample_records)

        fake_model.start_chat.assert_called_once_with(history=[])

    @pytest.mark.asyncio
    async def test_empty_answer_falls_back(self, sample_records, gemini_settings, fake_model, make_response):
        fake_model.start_chat.return_value.send_message_async.return_value = make_response("")
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            assert await advisor.chat("hola", sample_records) == CHAT_EMPTY_FALLBACK

    @pytest.mark.asyncio
    async def test_service_failure_falls_back(self, sample_records, gemini_settings, fake_model):
        fake_model.start_chat.return_value.send_message_async.side_effect = ConnectionError()
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            assert await advisor.chat("hola", sample_records) == CHAT_ERROR_FALLBACK

    @pytest.mark.asyncio
    async def test_reply_distinguishes_empty_answer_from_failure(self, sample_records, gemini_settings, fake_model, make_response):
        send = fake_model.start_chat.return_value.send_message_async
        advisor = FinancialAdvisor(settings=gemini_settings)

        with patch.object(FinancialAdvisor, "_build_model", return_value=fake_model):
            send.return_value = make_response("")
            empty = await advisor.chat_reply("hola", sample_records)
            send.side_effect = ConnectionError("reset")
            failed = await advisor.chat_reply("hola", sample_records)

        assert empty.ok and empty.text == CHAT_EMPTY_FALLBACK
        assert not failed.ok and failed.text == CHAT_ERROR_FALLBACK
        assert failed.error == "reset"

    @pytest.mark.asyncio
    async def test_missing_api_key_propagates(self, sample_records, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GEN_API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            await FinancialAdvisor().chat("hola", sample_records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
