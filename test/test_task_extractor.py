from datetime import date

import pytest

from extraction.errors import DocumentExtractionError, ResponseParseError
from extraction.task_extractor import TaskExtractor
from llm.errors import LLMAPIError, LLMConnectionError
from llm.llm_client import LLMClient

TODAY = date(2026, 1, 1)
CAPABILITY_ERROR = LLMAPIError(400, "Bad Request", "image input is not supported")


def _extractor(provider, text_extractor=None, **kwargs) -> TaskExtractor:
    return TaskExtractor(
        llm_client=LLMClient(provider=provider),
        text_extractor=text_extractor,
        today=lambda: TODAY,
        **kwargs,
    )


async def test_extract_plain_reminder(fake_provider_factory):
    provider = fake_provider_factory('[{"title":"Call dentist","dueDate":"2026-01-02"}]')
    tasks = await _extractor(provider).extract("call dentist tomorrow")

    assert [(t.title, t.due_date) for t in tasks] == [("Call dentist", "2026-01-02")]
    call = provider.calls[0]
    system, user = call["messages"]
    assert "Today is 2026-01-01" in system.content
    assert user.content == 'Extract tasks: "call dentist tomorrow"'
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 1500


async def test_extract_unparseable_response(fake_provider_factory):
    provider = fake_provider_factory("Sorry, I can't help with that.")
    with pytest.raises(ResponseParseError):
        await _extractor(provider).extract("call dentist")


async def test_document_native_success(fake_provider_factory, fake_text_extractor, pdf_file):
    provider = fake_provider_factory('[{"title":"Invoice #7 - ACME","amount":-120}]')
    tasks = await _extractor(provider, fake_text_extractor).extract_document(pdf_file)

    assert tasks[0].amount == -120.0
    assert fake_text_extractor.calls == []
    assert len(provider.calls) == 1


async def test_document_falls_back_to_text(fake_provider_factory, fake_text_extractor, pdf_file):
    provider = fake_provider_factory(
        CAPABILITY_ERROR,
        '[{"title":"Invoice #7","dueDate":"2026-02-01","amount":-120}]',
    )
    fallbacks = []
    extractor = _extractor(provider, fake_text_extractor, on_fallback=fallbacks.append)

    tasks = await extractor.extract_document(pdf_file)

    assert fake_text_extractor.calls == [pdf_file]
    assert fallbacks == [pdf_file]
    assert [t.title for t in tasks] == ["Invoice #7"]
    assert len(provider.calls) == 2
    second = provider.calls[1]["messages"]
    assert isinstance(second[1].content, str)
    assert "INVOICE #7 total $120.00" in second[1].content


async def test_document_other_errors_propagate(fake_provider_factory, fake_text_extractor, pdf_file):
    provider = fake_provider_factory(LLMAPIError(500, "Internal Server Error", "boom"))
    with pytest.raises(LLMAPIError):
        await _extractor(provider, fake_text_extractor).extract_document(pdf_file)
    assert fake_text_extractor.calls == []


async def test_document_fallback_extraction_failure(fake_provider_factory, pdf_file):
    class Failing:
        async def extract_text(self, path):
            raise DocumentExtractionError("no text")

    provider = fake_provider_factory(CAPABILITY_ERROR)
    with pytest.raises(DocumentExtractionError):
        await _extractor(provider, Failing()).extract_document(pdf_file)


async def test_extract_documents_keeps_going(fake_provider_factory, fake_text_extractor, tmp_path):
    paths = []
    for name in ("a.pdf", "b.pdf", "c.pdf"):
        p = tmp_path / name
        p.write_bytes(b"%PDF")
        paths.append(str(p))

    provider = fake_provider_factory(
        '[{"title":"A"}]',
        LLMConnectionError(),
        '[{"title":"C"}]',
    )
    results = await _extractor(provider, fake_text_extractor).extract_documents(paths)

    assert [r.path for r in results] == paths
    assert [r.ok for r in results] == [True, False, True]
    assert "Cannot connect to Jan.ai" in results[1].error
    assert results[2].tasks[0].title == "C"


async def test_mock_provider_end_to_end(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    tasks = await TaskExtractor(today=lambda: TODAY).extract("call dentist tomorrow")
    assert tasks[0].title == "Call dentist"
