"""
Unit tests for CreativePromptBuilder.

Tests cover:
1. Auto model / action derivation from the product analysis
2. Brand profile injection
3. Request builders (kind, images, tags)
4. Variation prompts for batch items
"""
import sys
import os
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from schemas import AnalysisResult, AspectRatio, BrandProfile, JobKind, TaggedImage
from utils.constants import AUTO_MODEL, AUTO_POSE, DEFAULT_ACTION, DEFAULT_MOTION_PROMPT
from utils.prompt_builder import CreativePromptBuilder, STUDIO_VARIATION_NOTE


def _analysis(category="General", gender="Unisex"):
    return AnalysisResult(
        description="A bottle", usp="Hydrating", product_category=category, target_gender=gender,
    )


BRAND = BrandProfile(style="minimalist", tone="warm", contrast="low")


# ==========================================================================
# Test 1: Derivation rules
# ==========================================================================

class TestDerivation:

    def test_auto_model_feminine(self):
        ctx = CreativePromptBuilder.derive_model_context(AUTO_MODEL, _analysis(gender="Feminine"))
        assert ctx == "Female Model"

    def test_auto_model_masculine(self):
        ctx = CreativePromptBuilder.derive_model_context(AUTO_MODEL, _analysis(gender="masculine"))
        assert ctx == "Male Model"

    def test_auto_model_unisex_is_neutral(self):
        ctx = CreativePromptBuilder.derive_model_context(AUTO_MODEL, _analysis(gender="Unisex"))
        assert ctx == "Professional Model (Neutral)"

    def test_explicit_model_kept(self):
        ctx = CreativePromptBuilder.derive_model_context("Hijab Model", _analysis(gender="Feminine"))
        assert ctx == "Hijab Model"

    def test_auto_model_without_analysis_kept(self):
        assert CreativePromptBuilder.derive_model_context(AUTO_MODEL, None) == AUTO_MODEL

    @pytest.mark.parametrize("category,fragment", [
        ("Running Shoes", "legs/feet"),
        ("Footwear", "legs/feet"),
        ("Skincare", "near face"),
        ("Cosmetics", "near face"),
        ("Apparel", "wearing the product"),
        ("Beverage", "consume"),
    ])
    def test_auto_action_by_category(self, category, fragment):
        action = CreativePromptBuilder.derive_action(AUTO_POSE, _analysis(category=category))
        assert action != DEFAULT_ACTION
        assert fragment in action.lower()

    def test_auto_action_unknown_category(self):
        action = CreativePromptBuilder.derive_action(AUTO_POSE, _analysis(category="Electronics"))
        assert action == DEFAULT_ACTION

    def test_smart_adaptive_pose_is_auto(self):
        action = CreativePromptBuilder.derive_action("Smart Adaptive Pose", _analysis(category="Electronics"))
        assert action == DEFAULT_ACTION

    def test_explicit_pose_kept(self):
        action = CreativePromptBuilder.derive_action("Sitting on a chair", _analysis(category="Shoes"))
        assert action == "Sitting on a chair"


# ==========================================================================
# Test 2: Brand profile
# ==========================================================================

class TestBrand:

    def test_brand_clause_empty_without_brand(self):
        assert CreativePromptBuilder.brand_clause(None) == ""

    def test_brand_clause(self):
        assert CreativePromptBuilder.brand_clause(BRAND) == " Brand Style: minimalist, Tone: warm."

    def test_studio_prompt_includes_contrast(self):
        prompt = CreativePromptBuilder.studio_prompt("Marble", BRAND)
        assert "Style: Marble" in prompt
        assert "Brand Style: minimalist, Lighting: warm, Contrast: low." in prompt

    def test_studio_prompt_without_brand(self):
        assert "Brand Style" not in CreativePromptBuilder.studio_prompt("Marble")

    def test_motion_prompt_default_and_brand(self):
        assert CreativePromptBuilder.motion_prompt("") == DEFAULT_MOTION_PROMPT
        assert CreativePromptBuilder.motion_prompt("Slow pan", BRAND) == "Slow pan Style: minimalist, Tone: warm."


# ==========================================================================
# Test 3: Request builders
# ==========================================================================

class TestRequests:

    def test_creative_prompt_request_is_pure(self):
        args = ("Serum 30ml", AUTO_MODEL, "Fresh", AUTO_POSE, "Bathroom", BRAND, _analysis("Skincare", "Feminine"))
        first = CreativePromptBuilder.creative_prompt_request(*args)
        second = CreativePromptBuilder.creative_prompt_request(*args)
        assert first == second
        assert first.kind == JobKind.TEXT_PROMPT
        assert "@img1" in first.system_instruction
        assert "@img2" in first.system_instruction
        assert "Female Model" in first.system_instruction
        assert first.system_instruction.endswith("Brand Style: minimalist, Tone: warm.")

    def test_creative_prompt_without_analysis_uses_general(self):
        request = CreativePromptBuilder.creative_prompt_request("Serum", "Male Model", "Bold", "Standing", "Street")
        assert "Category: General" in request.system_instruction

    def test_analysis_request_carries_image(self):
        image = TaggedImage(data=b"x", tag="@img1")
        request = CreativePromptBuilder.analysis_request(image)
        assert request.kind == JobKind.ANALYSIS
        assert request.images == (image,)

    def test_video_script_request(self):
        request = CreativePromptBuilder.video_script_request("Serum", "Glow", "Calm", 4)
        assert "Generate 4 scenes." in request.instruction
        assert "4-scene" in request.system_instruction

    def test_bulk_photo_keeps_pose(self):
        request = CreativePromptBuilder.bulk_variation_request(
            "photo", 6, product_description="Serum", mood="Calm", pose="Holding near face",
        )
        assert request.kind == JobKind.BULK_VARIATION
        assert request.quantity == 6
        assert 'KEEP POSE EXACTLY: "Holding near face"' in request.system_instruction

    def test_bulk_video_request(self):
        request = CreativePromptBuilder.bulk_variation_request(
            "video", 2, product_description="Serum", mood="Calm", scene_count=3, usp="Glow",
        )
        assert "Generate 2 full scripts." in request.instruction
        assert "Each Script Scenes: 3." in request.system_instruction

    def test_bulk_unknown_mode(self):
        with pytest.raises(ValueError):
            CreativePromptBuilder.bulk_variation_request("audio", 2, product_description="x", mood="y")

    def test_composite_request_keeps_image_order(self):
        product = TaggedImage(data=b"p", tag="@img1")
        model = TaggedImage(data=b"m", tag="@img2")
        request = CreativePromptBuilder.composite_request(
            [product, model], "@img2 holding @img1", AspectRatio.PORTRAIT_3_4,
        )
        assert [img.tag for img in request.images] == ["@img1", "@img2"]
        assert "@img2 holding @img1" in request.instruction
        assert request.aspect_ratio == AspectRatio.PORTRAIT_3_4

    def test_scene_visual_request_skips_missing_images(self):
        model = TaggedImage(data=b"m", tag="@img2")
        request = CreativePromptBuilder.scene_visual_request("Close-up", AspectRatio.SQUARE, None, model)
        assert request.images == (model,)


# ==========================================================================
# Test 4: Variation prompts
# ==========================================================================

class TestVariation:

    def test_first_item_uses_base(self):
        assert CreativePromptBuilder.variation_prompt("Base", 0, STUDIO_VARIATION_NOTE) == "Base"

    def test_later_items_numbered_from_two(self):
        prompt = CreativePromptBuilder.variation_prompt("Base", 2, STUDIO_VARIATION_NOTE)
        assert prompt == f"Base (Variation 3, {STUDIO_VARIATION_NOTE})"
