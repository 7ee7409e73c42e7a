import asyncio

import pytest

from genai_api.data_classes import Citation
from slidegenius.config import PipelineSettings
from slidegenius.models import AttachedDocument, GenerationParameters, SourceInput
from slidegenius.outline import (
    FALLBACK_ENTRY,
    OutlineParseError,
    OutlineSynthesizer,
    dedupe_citations,
    is_article_mode,
    parse_outline,
)

from tests.genai_stubs import StubGenAIClient, outline_json


def _pdf_attachment() -> AttachedDocument:
    return AttachedDocument.from_bytes("paper.pdf", "application/pdf", b"%PDF-1.7 body")


def test_article_mode_threshold_is_exclusive():
    assert not is_article_mode(SourceInput(text="x" * 250))
    assert is_article_mode(SourceInput(text="x" * 251))


def test_attachment_forces_article_mode():
    assert is_article_mode(SourceInput(text="short", attachment=_pdf_attachment()))


def test_topic_mode_enables_search_and_skips_attachment():
    client = StubGenAIClient(outline_text=outline_json(3))
    synthesizer = OutlineSynthesizer(client)

    result = asyncio.run(
        synthesizer.synthesize(SourceInput(text="Edge AI"), GenerationParameters(slide_count=3))
    )

    request = client.text_requests[0]
    assert request.enable_search is True
    assert request.attachment is None
    assert result.article_mode is False
    assert [entry.title for entry in result.entries] == ["Slide 0", "Slide 1", "Slide 2"]


def test_article_mode_disables_search_and_sends_attachment():
    client = StubGenAIClient(outline_text=outline_json(3))
    synthesizer = OutlineSynthesizer(client)
    source = SourceInput(text="", attachment=_pdf_attachment())

    result = asyncio.run(synthesizer.synthesize(source, GenerationParameters(slide_count=3)))

    request = client.text_requests[0]
    assert request.enable_search is False
    assert request.attachment.mime_type == "application/pdf"
    assert request.attachment.data == b"%PDF-1.7 body"
    assert result.article_mode is True


def test_configured_threshold_and_model_are_used():
    client = StubGenAIClient(outline_text=outline_json(3))
    settings = PipelineSettings(text_model="custom-text", article_threshold=10)
    synthesizer = OutlineSynthesizer(client, settings)

    result = asyncio.run(
        synthesizer.synthesize(SourceInput(text="x" * 11), GenerationParameters(slide_count=3))
    )

    assert result.article_mode is True
    assert client.text_requests[0].model_name == "custom-text"


def test_unparseable_output_yields_single_fallback_entry():
    client = StubGenAIClient(outline_text="I could not produce an outline today.")
    synthesizer = OutlineSynthesizer(client)

    result = asyncio.run(
        synthesizer.synthesize(SourceInput(text="Topic"), GenerationParameters(slide_count=6))
    )

    assert result.entries == (FALLBACK_ENTRY,)
    assert result.parse_failed is True
    assert FALLBACK_ENTRY.title == "Generation failed"


def test_parse_outline_keeps_model_count():
    entries = parse_outline("Here you go:\n" + outline_json(4) + "\nEnjoy!")
    assert len(entries) == 4
    assert entries[2].content == "Notes for slide 2"
    assert entries[2].visual_description == "Layout 2"


@pytest.mark.parametrize("text", ["[]", '["just a string"]', "", "no array"])
def test_parse_outline_rejects_unusable_arrays(text):
    with pytest.raises(OutlineParseError):
        parse_outline(text)


def test_citations_are_deduplicated_by_url():
    citations = [
        Citation(url="https://a.example", title="T1"),
        Citation(url="https://b.example", title="T2"),
        Citation(url="https://a.example", title="T3"),
    ]
    sources = dedupe_citations(citations)
    assert [(item.url, item.title) for item in sources] == [
        ("https://a.example", "T3"),
        ("https://b.example", "T2"),
    ]


def test_citations_missing_fields_are_dropped():
    citations = [
        Citation(url="https://a.example", title=None),
        Citation(url="", title="Orphan"),
        Citation(url="https://c.example", title="Kept"),
    ]
    assert [item.url for item in dedupe_citations(citations)] == ["https://c.example"]


def test_citations_survive_outline_parse_failure():
    client = StubGenAIClient(
        outline_text="garbage",
        citations=[Citation(url="https://a.example", title="A")],
    )
    result = asyncio.run(
        OutlineSynthesizer(client).synthesize(SourceInput(text="Topic"), GenerationParameters())
    )
    assert [item.title for item in result.sources] == ["A"]


def test_missing_client_is_rejected():
    with pytest.raises(RuntimeError):
        asyncio.run(
            OutlineSynthesizer(None).synthesize(SourceInput(text="Topic"), GenerationParameters())
        )
