"""
Unit tests for StudioAgent batch flows.
"""
import asyncio
import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import FakeBackend, image_response, no_image_response
from schemas import BrandProfile
from agents import StudioAgent, TotalFailureError
from utils.prompt_builder import COMPOSITE_VARIATION_NOTE, STUDIO_VARIATION_NOTE


def _prompts(backend):
    return [call["contents"][-1] for call in backend.content_calls]


class TestStudioShots:

    def test_variation_prompts_per_item(self, make_client, product_image):
        backend = FakeBackend(content=lambda **kw: image_response())
        agent = StudioAgent(make_client(backend), window=4)

        uris = asyncio.run(agent.generate_studio_images(product_image, "Marble", "1:1", quantity=3))

        assert len(uris) == 3
        prompts = sorted(_prompts(backend), key=len)
        base = prompts[0]
        assert "Variation" not in base
        assert f"{base} (Variation 2, {STUDIO_VARIATION_NOTE})" in prompts
        assert f"{base} (Variation 3, {STUDIO_VARIATION_NOTE})" in prompts

    def test_partial_success_returns_only_artifacts(self, make_client, product_image):
        def content(**kw):
            if "(Variation 2," in kw["contents"][-1]:
                return no_image_response()
            return image_response()

        backend = FakeBackend(content=content)
        agent = StudioAgent(make_client(backend), window=4)

        uris = asyncio.run(agent.generate_studio_images(product_image, "Marble", "16:9", quantity=3))
        assert len(uris) == 2

    def test_all_failed(self, make_client, product_image):
        def content(**kw):
            raise RuntimeError("quota exceeded")

        agent = StudioAgent(make_client(FakeBackend(content=content)), window=4)

        with pytest.raises(TotalFailureError, match="No image generated"):
            asyncio.run(agent.generate_studio_images(product_image, "Marble", "1:1", quantity=2))

    def test_rejects_composite_only_ratio(self, make_client, product_image):
        backend = FakeBackend(content=lambda **kw: image_response())
        agent = StudioAgent(make_client(backend))

        with pytest.raises(ValueError):
            asyncio.run(agent.generate_studio_images(product_image, "Marble", "3:4"))
        assert backend.content_calls == []

    def test_brand_in_prompt(self, make_client, product_image):
        backend = FakeBackend(content=lambda **kw: image_response())
        agent = StudioAgent(make_client(backend))
        brand = BrandProfile(style="luxe", tone="moody", contrast="high")

        asyncio.run(agent.generate_studio_images(product_image, "Marble", "1:1", brand=brand))
        assert "Contrast: high" in _prompts(backend)[0]


class TestComposites:

    def test_images_and_notes(self, make_client, product_image, model_image):
        backend = FakeBackend(content=lambda **kw: image_response())
        agent = StudioAgent(make_client(backend), window=4)

        uris = asyncio.run(agent.generate_composite_images(
            [product_image, model_image], "@img2 holding @img1", "3:4", quantity=2,
        ))

        assert len(uris) == 2
        assert all(len(call["contents"]) == 3 for call in backend.content_calls)
        assert any(COMPOSITE_VARIATION_NOTE in p for p in _prompts(backend))

    def test_all_failed(self, make_client, product_image):
        agent = StudioAgent(make_client(FakeBackend(content=lambda **kw: no_image_response())))

        with pytest.raises(TotalFailureError, match="No composite images generated"):
            asyncio.run(agent.generate_composite_images([product_image], "on a table", "4:3", quantity=1))

    def test_window_bounds_groups(self, make_client, product_image):
        settled = []
        backend = FakeBackend(content=lambda **kw: image_response())
        agent = StudioAgent(make_client(backend), window=2, on_item_settled=settled.append)

        uris = asyncio.run(agent.generate_composite_images([product_image], "on a table", "1:1", quantity=5))

        assert len(uris) == 5
        assert len(settled) == 5
        assert len(backend.api_keys) == 5
