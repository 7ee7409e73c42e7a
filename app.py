"""Streamlit UI for interacting with the SlideGenius generation pipeline."""

from __future__ import annotations

import asyncio
import io
import json
import logging
import re
import textwrap
from typing import List, Optional

import streamlit as st
from PIL import Image, ImageDraw

from genai_api.data_classes import (
    ImageGenerationRequest,
    ImageGenerationResponse,
    TextGenerationRequest,
    TextGenerationResponse,
)
from slidegenius.config import PipelineSettings
from slidegenius.content_normalizer import UploadedFile
from slidegenius.credentials import EnvironmentCredentialGate
from slidegenius.errors import CredentialError, SlideGeniusError
from slidegenius.models import (
    MAX_SLIDE_COUNT,
    MIN_SLIDE_COUNT,
    ComplexityLevel,
    GenerationParameters,
    Language,
    SlideOutlineEntry,
    VisualStyle,
)
from slidegenius.pipeline import PresentationPipeline
from slidegenius.session import PresentationSession

LOGGER = logging.getLogger(__name__)

DEMO_MODE = "Demo (offline)"
GEMINI_MODE = "Gemini (GEMINI_API_KEY)"

_SLIDE_COUNT_PATTERN = re.compile(r"Create exactly (\d+) slides")
_TOPIC_PATTERN = re.compile(r'Research the topic: "(.*)" and create the deck', re.DOTALL)
_CONTENT_PATTERN = re.compile(r'CONTENT TO ANALYZE:\n"(.*)', re.DOTALL)
_HEADLINE_PATTERN = re.compile(r"^HEADLINE: (.*)$", re.MULTILINE)


def _extract_request_excerpt(prompt: str, *, max_width: int = 40) -> str:
    """Return a concise summary of the topic or article embedded in ``prompt``."""

    if not prompt:
        return "Untitled"
    match = _TOPIC_PATTERN.search(prompt) or _CONTENT_PATTERN.search(prompt)
    section = match.group(1) if match else ""
    section = section.strip().strip('"').replace("\n", " ")
    if not section:
        return "Untitled"
    return textwrap.shorten(section, width=max_width, placeholder="…")


class DemoGenAIClient:
    """Offline stand-in for the Gemini client used for demos and UI checks."""

    model_name = "demo-text"
    image_model_name = "demo-image"

    def __init__(self, *, slide_size: tuple[int, int] = (640, 360)) -> None:
        self.slide_size = slide_size

    async def generate_content(self, request: TextGenerationRequest) -> TextGenerationResponse:
        match = _SLIDE_COUNT_PATTERN.search(request.prompt)
        count = int(match.group(1)) if match else MIN_SLIDE_COUNT
        excerpt = _extract_request_excerpt(request.prompt)
        outline: List[dict] = []
        for idx in range(1, count + 1):
            if idx == 1:
                title = excerpt
            elif idx == count:
                title = "Summary"
            else:
                title = f"{excerpt} - Part {idx - 1}"
            outline.append(
                SlideOutlineEntry(
                    title=title,
                    content=f"Demo talking points for slide {idx}.",
                    visual_description="Clean layout with a large headline.",
                ).to_dict()
            )
        text = "Here is the outline:\n" + json.dumps(outline, ensure_ascii=False)
        return TextGenerationResponse(text=text, model_used=self.model_name)

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        match = _HEADLINE_PATTERN.search(request.prompt)
        headline = match.group(1) if match else "Slide"
        image = Image.new("RGB", self.slide_size, color=(30, 41, 59))
        draw = ImageDraw.Draw(image)
        draw.text((32, self.slide_size[1] // 2 - 8), headline, fill=(241, 245, 249))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return ImageGenerationResponse(
            image_bytes=buffer.getvalue(),
            mime_type="image/png",
            model_used=self.image_model_name,
        )


class DeferredGeminiClient:
    """Create the Gemini client on first request.

    The credential gate is consulted before any request, so a missing key
    surfaces as a credential prompt rather than a start-up failure.
    """

    def __init__(self, settings: PipelineSettings) -> None:
        self.settings = settings
        self.model_name = settings.text_model
        self.image_model_name = settings.image_model
        self._client = None

    def resolve(self):
        if self._client is None:
            from genai_api.providers.gemini import GeminiModel

            self._client = GeminiModel(
                model_name=self.settings.text_model,
                image_model_name=self.settings.image_model,
            )
        return self._client

    async def generate_content(self, request: TextGenerationRequest) -> TextGenerationResponse:
        return await self.resolve().generate_content(request)

    async def generate_image(self, request: ImageGenerationRequest) -> ImageGenerationResponse:
        return await self.resolve().generate_image(request)


def _build_session(mode: str) -> PresentationSession:
    settings = PipelineSettings.from_env()
    if mode == GEMINI_MODE:
        llm_client = DeferredGeminiClient(settings)
        gate = EnvironmentCredentialGate()
    else:
        llm_client = DemoGenAIClient()
        gate = None
    pipeline = PresentationPipeline(llm_client, settings=settings, credential_gate=gate)
    return PresentationSession(pipeline)


def _get_session(mode: str) -> Optional[PresentationSession]:
    if st.session_state.get("mode") != mode:
        try:
            st.session_state["session"] = _build_session(mode)
        except SlideGeniusError as exc:
            st.error(exc.message)
            return None
        except ValueError as exc:
            st.error("Invalid SLIDEGENIUS_* setting.")
            st.text(str(exc))
            return None
        st.session_state["mode"] = mode
        st.session_state["last_upload"] = None
    return st.session_state["session"]


def _handle_upload(session: PresentationSession, upload) -> None:
    if upload is None:
        return
    upload_key = (upload.name, upload.size)
    if st.session_state.get("last_upload") == upload_key:
        return
    st.session_state["last_upload"] = upload_key
    try:
        asyncio.run(
            session.upload(
                UploadedFile(
                    name=upload.name,
                    mime_type=upload.type or "",
                    payload=upload.getvalue(),
                )
            )
        )
    except SlideGeniusError as exc:
        st.error(exc.message)


def _render_export(label: str, export, key: str) -> None:
    try:
        exported = export()
    except SlideGeniusError as exc:
        st.error(exc.message)
        return
    st.download_button(
        label,
        data=exported.data,
        file_name=exported.file_name,
        mime=exported.mime_type,
        key=key,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    st.set_page_config(page_title="SlideGenius", layout="wide")
    st.title("SlideGenius")

    with st.sidebar:
        st.header("Generation settings")
        mode = st.radio("Mode", (DEMO_MODE, GEMINI_MODE), index=0)
        level = st.selectbox(
            "Audience", list(ComplexityLevel), index=1, format_func=lambda item: item.value
        )
        style = st.selectbox("Visual style", list(VisualStyle), format_func=lambda item: item.value)
        language = st.selectbox("Language", list(Language), format_func=lambda item: item.value)
        slide_count = st.slider("Slides", MIN_SLIDE_COUNT, MAX_SLIDE_COUNT, 5)

    session = _get_session(mode)
    if session is None:
        return
    session.parameters = GenerationParameters(
        level=level, style=style, language=language, slide_count=slide_count
    )

    if not asyncio.run(session.refresh_credential()):
        st.warning("A billing-enabled Gemini API key is required.")
        if st.button("Reload API key"):
            asyncio.run(session.select_credential())
            st.rerun()

    if session.presentation is None:
        text = st.text_area(
            "Topic or article",
            value=session.source.text,
            height=180,
            placeholder="Enter a topic, paste an article, or upload a file...",
        )
        session.set_text(text)
        _handle_upload(session, st.file_uploader("Upload (PDF, DOCX, TXT)", type=["pdf", "docx", "txt"]))
        if session.source.attachment is not None:
            col_name, col_remove = st.columns([4, 1])
            col_name.caption(f"Attached: {session.source.attachment.name}")
            if col_remove.button("Remove"):
                session.remove_attachment()
                st.rerun()

        if st.button("Generate", type="primary", disabled=session.pipeline.is_generating):
            with st.status("Generating...", expanded=True) as status:
                try:
                    asyncio.run(session.generate(progress=lambda step, message: st.write(message)))
                except SlideGeniusError as exc:
                    status.update(label="Failed", state="error")
                    st.error(exc.message)
                    if isinstance(exc, CredentialError):
                        st.caption("Select a different API key and try again.")
                    return
                status.update(label="Done", state="complete")
            st.rerun()
        return

    presentation = session.presentation
    st.subheader(presentation.topic)
    st.caption(f"{len(presentation.slides)} slides")

    slide = session.current_slide
    st.image(slide.image_bytes, caption=slide.title, use_container_width=True)
    nav_prev, nav_pos, nav_next = st.columns([1, 4, 1])
    if nav_prev.button("Previous", disabled=session.navigator.index == 0):
        session.navigator.previous()
        st.rerun()
    nav_pos.caption(f"Slide {session.navigator.index + 1} / {len(presentation.slides)}")
    if nav_next.button("Next", disabled=session.navigator.index >= len(presentation.slides) - 1):
        session.navigator.next()
        st.rerun()
    if slide.speaker_notes:
        st.info(slide.speaker_notes)

    export_cols = st.columns(3)
    with export_cols[0]:
        _render_export("Download slide", session.download_current_slide, "download-slide")
    with export_cols[1]:
        _render_export("Export PDF", session.export_pdf, "export-pdf")
    with export_cols[2]:
        _render_export("Export PPTX", session.export_pptx, "export-pptx")

    if presentation.sources:
        st.markdown("#### Sources")
        for source in presentation.sources:
            st.markdown(f"- [{source.title}]({source.url})")

    if st.button("Create a new presentation"):
        session.reset()
        st.rerun()


if __name__ == "__main__":  # pragma: no cover - Streamlit handles execution
    main()
