import asyncio
import io
import json

import pytest

pytest.importorskip("streamlit")
from PIL import Image

from genai_api.data_classes import ImageGenerationRequest, TextGenerationRequest
from slidegenius.json_extraction import extract_json_array
from slidegenius.models import GenerationParameters, SlideOutlineEntry
from slidegenius.prompts import build_outline_prompt, build_slide_prompt

import app


def test_extract_request_excerpt_handles_missing_marker():
    assert app._extract_request_excerpt("") == "Untitled"
    assert app._extract_request_excerpt("no markers at all") == "Untitled"


def test_extract_request_excerpt_reads_topic_prompt():
    prompt = build_outline_prompt(
        GenerationParameters(), text="Coral reef restoration", article_mode=False, max_article_chars=100
    )
    assert app._extract_request_excerpt(prompt) == "Coral reef restoration"


def test_demo_client_follows_requested_slide_count():
    prompt = build_outline_prompt(
        GenerationParameters(slide_count=6), text="Rust adoption", article_mode=False, max_article_chars=100
    )
    response = asyncio.run(app.DemoGenAIClient().generate_content(TextGenerationRequest(prompt=prompt)))

    outline = extract_json_array(response.text)
    assert len(outline) == 6
    assert outline[0]["title"] == "Rust adoption"
    assert outline[-1]["title"] == "Summary"
    assert json.loads(json.dumps(outline)) == outline


def test_demo_client_draws_png_slides():
    client = app.DemoGenAIClient(slide_size=(160, 90))
    prompt = build_slide_prompt(SlideOutlineEntry(title="Hello", content="World", visual_description=""))
    response = asyncio.run(client.generate_image(ImageGenerationRequest(prompt=prompt)))

    assert response.has_image
    with Image.open(io.BytesIO(response.image_bytes)) as image:
        assert image.format == "PNG"
        assert image.size == (160, 90)


def test_demo_session_generates_offline():
    session = app._build_session(app.DEMO_MODE)
    session.parameters = GenerationParameters(slide_count=3)
    session.set_text("Offline demo")

    presentation = asyncio.run(session.generate())

    assert [slide.slide_id for slide in presentation.slides] == ["slide-0", "slide-1", "slide-2"]
    assert session.credential_gate is None


def test_gemini_session_defers_client_until_key_is_present(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "")

    session = app._build_session(app.GEMINI_MODE)

    client = session.pipeline.synthesizer.llm_client
    assert isinstance(client, app.DeferredGeminiClient)
    assert asyncio.run(session.refresh_credential()) is False
    assert client._client is None

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    assert asyncio.run(session.refresh_credential()) is True
    assert client.resolve().get_provider_name() == "Gemini"
    assert client.resolve() is client.resolve()
