import asyncio

import pytest

from genai_api.exceptions import LLMAPIError
from slidegenius.assembler import DEFAULT_TOPIC, DeckAssembler
from slidegenius.config import PipelineSettings
from slidegenius.errors import SlideRenderError
from slidegenius.models import (
    GenerationParameters,
    SlideOutlineEntry,
    SourceCitation,
    VisualStyle,
    decode_data_url,
)
from slidegenius.renderer import SlideRenderer

from tests.genai_stubs import StubGenAIClient, make_png


def _outline(count: int):
    return [
        SlideOutlineEntry(title=f"Slide {idx}", content=f"Notes {idx}", visual_description=f"Visual {idx}")
        for idx in range(count)
    ]


def _assembler(client: StubGenAIClient) -> DeckAssembler:
    return DeckAssembler(SlideRenderer(client))


def test_renderer_returns_data_url():
    client = StubGenAIClient()
    settings = PipelineSettings(image_model="custom-image")
    data_url = asyncio.run(SlideRenderer(client, settings).render(_outline(1)[0]))

    mime_type, payload = decode_data_url(data_url)
    assert mime_type == "image/png"
    assert payload == make_png("Slide 0")
    assert client.image_requests[0].model_name == "custom-image"
    assert client.image_requests[0].response_modalities == ["IMAGE"]


def test_renderer_raises_when_no_image_returned():
    client = StubGenAIClient(empty_images_for=["Slide 0"])
    with pytest.raises(SlideRenderError) as excinfo:
        asyncio.run(SlideRenderer(client).render(_outline(1)[0]))
    assert excinfo.value.message == "image generation failed"


def test_slides_follow_outline_order_despite_completion_order():
    outline = _outline(4)
    client = StubGenAIClient(
        render_delays={"Slide 0": 0.15, "Slide 1": 0.1, "Slide 2": 0.05, "Slide 3": 0.0}
    )
    params = GenerationParameters(slide_count=4, style=VisualStyle.DARK_MODE)
    sources = (SourceCitation(title="A", url="https://a.example"),)

    presentation = asyncio.run(_assembler(client).assemble(outline, params, sources))

    assert client.completed_renders == ["Slide 3", "Slide 2", "Slide 1", "Slide 0"]
    assert len(client.image_requests) == 4
    assert [slide.slide_id for slide in presentation.slides] == [
        "slide-0",
        "slide-1",
        "slide-2",
        "slide-3",
    ]
    for entry, slide in zip(outline, presentation.slides):
        assert slide.title == entry.title
        assert slide.speaker_notes == entry.content
        assert slide.image_bytes == client.images[entry.title]
    assert presentation.topic == "Slide 0"
    assert presentation.style is VisualStyle.DARK_MODE
    assert presentation.sources == sources
    assert presentation.created_at.tzinfo is not None


def test_presentation_ids_are_unique():
    client = StubGenAIClient()
    assembler = _assembler(client)
    first = asyncio.run(assembler.assemble(_outline(3), GenerationParameters(slide_count=3)))
    second = asyncio.run(assembler.assemble(_outline(3), GenerationParameters(slide_count=3)))
    assert first.presentation_id != second.presentation_id


def test_blank_first_title_uses_placeholder_topic():
    outline = [SlideOutlineEntry(title="", content="c", visual_description="v")] + _outline(2)
    presentation = asyncio.run(
        _assembler(StubGenAIClient()).assemble(outline, GenerationParameters(slide_count=3))
    )
    assert presentation.topic == DEFAULT_TOPIC


def test_single_failure_discards_whole_batch():
    client = StubGenAIClient(
        empty_images_for=["Slide 1"],
        render_delays={"Slide 0": 0.5, "Slide 2": 0.5},
    )

    with pytest.raises(SlideRenderError):
        asyncio.run(_assembler(client).assemble(_outline(3), GenerationParameters(slide_count=3)))

    assert len(client.image_requests) == 3
    assert "Slide 0" not in client.completed_renders
    assert "Slide 2" not in client.completed_renders


def test_lowest_index_failure_is_reported():
    client = StubGenAIClient(
        image_errors={
            "Slide 0": LLMAPIError("first", provider="stub"),
            "Slide 2": LLMAPIError("third", provider="stub"),
        }
    )
    with pytest.raises(LLMAPIError) as excinfo:
        asyncio.run(_assembler(client).render_all(_outline(3)))
    assert excinfo.value.message == "first"


def test_empty_outline_renders_nothing():
    client = StubGenAIClient()
    assert asyncio.run(_assembler(client).render_all([])) == []
    assert client.image_requests == []


def test_cancelling_the_join_cancels_in_flight_renders():
    client = StubGenAIClient(render_delays={"Slide 0": 0.5, "Slide 1": 0.5, "Slide 2": 0.5})
    assembler = _assembler(client)

    async def scenario():
        join = asyncio.create_task(assembler.render_all(_outline(3)))
        await asyncio.sleep(0.05)
        join.cancel()
        with pytest.raises(asyncio.CancelledError):
            await join
        await asyncio.sleep(0.6)

    asyncio.run(scenario())

    assert len(client.image_requests) == 3
    assert client.completed_renders == []
