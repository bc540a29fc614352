"""
Creative Prompt Builder for the studio flows.

모든 메서드는 순수 함수입니다 (외부 호출 없음, 같은 입력 → 같은 출력).
- 카테고리 기반 액션 자동 선택 (신발 / 스킨케어 / 패션 / 음료·식품)
- 타깃 성별 기반 모델 컨텍스트 자동 선택
- 브랜드 프로필 스타일/톤 주입
- 이미지 태그 규칙: @img1 = 제품, @img2 = 모델 (태그가 실제 업로드와 맞는지는 호출자 책임)
"""

from typing import Optional, Sequence

from schemas import (
    AnalysisResult,
    AspectRatio,
    BrandProfile,
    GenerationRequest,
    JobKind,
    TaggedImage,
)
from utils.constants import (
    AUTO_MODEL,
    AUTO_POSE,
    CATEGORY_ACTIONS,
    DEFAULT_ACTION,
    DEFAULT_CATEGORY,
    DEFAULT_MOTION_PROMPT,
    GENDER_MODEL_CONTEXT,
    NEUTRAL_MODEL_CONTEXT,
    SMART_POSE_MARKER,
    TAG_MODEL,
    TAG_PRODUCT,
)


ANALYSIS_INSTRUCTION = (
    "Analyze this product image. Identify the visual description, suggest a USP, "
    "categorize the product type (e.g., Skincare, Shoes, Apparel), and determine the "
    "likely target gender style (Feminine, Masculine, or Unisex)."
)

CREATIVE_DIRECTOR_TEMPLATE = """You are an Adaptive Creative Director.
Your goal is to generate a high-quality Image Prompt in **Indonesian (Bahasa Indonesia)** that perfectly fits the Product Type and Model Gender.

**ADAPTIVE LOGIC (INTERNAL THOUGHT PROCESS):**
1. **Analyze Product Category**: ({category}).
   - If Shoes -> Focus on feet/legs.
   - If Skincare -> Focus on face/skin.
   - If Fashion -> Focus on outfit fit.
2. **Analyze Model Context**: ({model_context}).
   - If Female -> Use feminine styling adjectives (elegant, soft, chic).
   - If Male -> Use masculine styling adjectives (sharp, bold, rugged).
3. **Visual Cohesion**: Ensure the model's outfit MATCHES the product.

STRICT FORMULA (Output Sequence):
"[Deskripsi Objek (Model + Pakaian Sesuai Produk)] + [Deskripsi Aksi Adaptif] + [Deskripsi Setting] + [Deskripsi Gaya] + [Kualitas Output]"

REFERENCE EXAMPLE:
"{model_tag} wanita muda mengenakan dress musim panas putih yang flowy, memegang botol sunscreen {product_tag}. Aksi mengoleskan sedikit krim ke bahu dengan lembut. Pastikan ukuran botol proporsional. Framing medium shot. Latar belakang pantai tropis buram. Pencahayaan matahari alami (golden hour), estetik, fotorealistik 8k."

MANDATORY RULES:
1. **Tags**: Use '{product_tag}' (Product) and '{model_tag}' (Model).
2. **Clothing Intelligence**: You MUST invent the model's outfit based on the '{mood}' and Product Category.
3. **Proportions**: Include "Pastikan ukuran produk terlihat proporsional, tidak membesar."
4. **Language**: Indonesian.

Inputs:
- Product Info: {product_description}
- Category: {category}
- Model Type: {model_context}
- Action/Pose: {action}
- Environment: {background}
- Mood: {mood}

Output only the final prompt string."""

VIDEO_SCRIPT_TEMPLATE = """You are an expert Commercial Director.
Create a {scene_count}-scene video storyboard for a short ad (Reels/TikTok style).

**NARRATIVE CONSISTENCY:**
- Ensure the Story flows logically from Scene 1 to Scene {scene_count}.
- **CONSISTENT VISUALS:** The model, setting, and lighting MUST be described consistently across all scenes.

**OUTPUT REQUIREMENTS:**
1. Generate exactly {scene_count} scenes.
2. VO Language: Indonesian.
3. Duration: Recommend duration (3s, 5s, etc) summing to max 30-45s.
4. **Visual Parameters:** Explicitly define the Shot Type (e.g., Close-Up), Angle, and specific Action.

**VISUAL PROMPT FORMAT (visualPrompt field):**
"Shot: [SHOT_TYPE]. Angle: [ANGLE]. Subject: [Consistent Model Description] [ACTION] with [PRODUCT]. Setting: [Consistent Background]. Lighting: [MOOD]. High Quality, 8k."

*NOTE:* Do not use {product_tag} tags in 'shotType', 'cameraAngle', or 'actionDescription' fields. Use them in 'visualPrompt' if needed."""

BULK_PHOTO_TEMPLATE = """You are a Bulk Prompt Generator.
Task: Generate {quantity} distinct image prompts in **Indonesian** following this STRICT structure:

Structure: [Deskripsi Objek] + [Deskripsi Aksi] + [Deskripsi Setting] + [Deskripsi Gaya] + [Kualitas Output]

RULES:
1. Use '{product_tag}' for product and '{model_tag}' for model.
2. Include "Pastikan ukuran produk proporsional" in every prompt.
3. KEEP POSE EXACTLY: "{pose}".
4. VARY: Background, Lighting, Camera Angle, and CRITICALLY: The Model's Clothing (Outfit).
5. Output in Indonesian.

Inputs:
Product: {product_description}
Model: {model_description}
Mood: {mood}"""

BULK_VIDEO_TEMPLATE = """You are a Bulk Video Script Generator.
Task: Generate {quantity} DIFFERENT video ad concepts.

Constraints:
1. Each Script Scenes: {scene_count}.
2. VO Language: Indonesian (Natural Speech, NO tags like {product_tag}).
3. VO Length: 20-25 words per scene.
4. VISUAL PROMPT FORMAT (Strict): "buat model berbicara '[VO_TEXT]'. jangan ada teks atau gambar dan musik dividio ini, buat vidio serealistis mungkin tanpa mengubah detail model dan produk.\""""

STUDIO_VARIATION_NOTE = "slightly different angle or lighting nuance"
COMPOSITE_VARIATION_NOTE = "try a slightly different angle or composition arrangement"


class CreativePromptBuilder:
    """
    Structured studio inputs → instruction strings / GenerationRequest values.

    Never raises on missing optional fields; falls back to generic defaults.
    """

    # =========================================================================
    # Policy rules
    # =========================================================================

    @staticmethod
    def derive_model_context(model_type: str, analysis: Optional[AnalysisResult]) -> str:
        """Auto model selection from the analysed target gender."""
        if analysis is None or model_type != AUTO_MODEL:
            return model_type
        gender = (analysis.target_gender or "").strip().lower()
        return GENDER_MODEL_CONTEXT.get(gender, NEUTRAL_MODEL_CONTEXT)

    @staticmethod
    def derive_action(pose: str, analysis: Optional[AnalysisResult]) -> str:
        """Category-conditioned default action when the pose is on auto."""
        if analysis is None:
            return pose
        if SMART_POSE_MARKER not in pose and pose != AUTO_POSE:
            return pose
        category = (analysis.product_category or "").lower()
        for keywords, action in CATEGORY_ACTIONS:
            if any(k in category for k in keywords):
                return action
        return DEFAULT_ACTION

    @staticmethod
    def brand_clause(brand: Optional[BrandProfile]) -> str:
        if brand is None:
            return ""
        return f" Brand Style: {brand.style}, Tone: {brand.tone}."

    # =========================================================================
    # Instruction strings
    # =========================================================================

    @staticmethod
    def creative_director_instruction(
        product_description: str,
        model_type: str,
        mood: str,
        pose: str,
        background: str,
        brand: Optional[BrandProfile] = None,
        analysis: Optional[AnalysisResult] = None,
    ) -> str:
        model_context = CreativePromptBuilder.derive_model_context(model_type, analysis)
        action = CreativePromptBuilder.derive_action(pose, analysis)
        category = analysis.product_category if analysis else DEFAULT_CATEGORY
        instruction = CREATIVE_DIRECTOR_TEMPLATE.format(
            category=category or DEFAULT_CATEGORY,
            model_context=model_context,
            action=action,
            product_description=product_description,
            background=background,
            mood=mood,
            product_tag=TAG_PRODUCT,
            model_tag=TAG_MODEL,
        )
        return instruction + CreativePromptBuilder.brand_clause(brand)

    @staticmethod
    def video_script_instruction(scene_count: int, brand: Optional[BrandProfile] = None) -> str:
        instruction = VIDEO_SCRIPT_TEMPLATE.format(scene_count=scene_count, product_tag=TAG_PRODUCT)
        return instruction + CreativePromptBuilder.brand_clause(brand)

    @staticmethod
    def bulk_photo_instruction(
        quantity: int,
        product_description: str,
        mood: str,
        pose: str = "",
        model_description: str = "",
    ) -> str:
        return BULK_PHOTO_TEMPLATE.format(
            quantity=quantity,
            product_description=product_description,
            model_description=model_description,
            mood=mood,
            pose=pose,
            product_tag=TAG_PRODUCT,
            model_tag=TAG_MODEL,
        )

    @staticmethod
    def bulk_video_instruction(quantity: int, scene_count: int) -> str:
        return BULK_VIDEO_TEMPLATE.format(
            quantity=quantity, scene_count=scene_count, product_tag=TAG_PRODUCT,
        )

    @staticmethod
    def studio_prompt(style: str, brand: Optional[BrandProfile] = None) -> str:
        prompt = (
            f"Create a professional studio photography shot of this product. Style: {style}. "
            "High resolution, 8k, photorealistic."
        )
        if brand is not None:
            prompt += f" Brand Style: {brand.style}, Lighting: {brand.tone}, Contrast: {brand.contrast}."
        return prompt

    @staticmethod
    def composite_prompt(instruction: str, brand: Optional[BrandProfile] = None) -> str:
        prompt = (
            f"Compose these images into a single cohesive scene. {instruction}. "
            "Seamless blending, photorealistic, perfect lighting match."
        )
        if brand is not None:
            prompt += f" Apply brand style: {brand.style}, {brand.tone} lighting."
        return prompt

    @staticmethod
    def scene_visual_prompt(scene_prompt: str) -> str:
        return f"{scene_prompt}. Photorealistic, 8k, seamless composition."

    @staticmethod
    def motion_prompt(motion: str, brand: Optional[BrandProfile] = None) -> str:
        prompt = motion or DEFAULT_MOTION_PROMPT
        if brand is not None:
            prompt += f" Style: {brand.style}, Tone: {brand.tone}."
        return prompt

    @staticmethod
    def variation_prompt(base: str, index: int, note: str) -> str:
        """Index 0 keeps the base prompt; later items ask for a variation."""
        if index <= 0:
            return base
        return f"{base} (Variation {index + 1}, {note})"

    # =========================================================================
    # GenerationRequest builders
    # =========================================================================

    @staticmethod
    def analysis_request(product_image: TaggedImage) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.ANALYSIS,
            instruction=ANALYSIS_INSTRUCTION,
            images=(product_image,),
        )

    @staticmethod
    def creative_prompt_request(
        product_description: str,
        model_type: str,
        mood: str,
        pose: str,
        background: str,
        brand: Optional[BrandProfile] = None,
        analysis: Optional[AnalysisResult] = None,
    ) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.TEXT_PROMPT,
            instruction="Generate the adaptive prompt in Indonesian.",
            system_instruction=CreativePromptBuilder.creative_director_instruction(
                product_description, model_type, mood, pose, background, brand, analysis,
            ),
        )

    @staticmethod
    def video_script_request(
        product_description: str,
        usp: str,
        mood: str,
        scene_count: int,
        brand: Optional[BrandProfile] = None,
    ) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.TEXT_PROMPT,
            instruction=(
                f"Product: {product_description}. USP: {usp}. Mood: {mood}. "
                f"Generate {scene_count} scenes."
            ),
            system_instruction=CreativePromptBuilder.video_script_instruction(scene_count, brand),
            quantity=max(scene_count, 1),
        )

    @staticmethod
    def bulk_variation_request(
        mode: str,
        quantity: int,
        product_description: str,
        mood: str,
        pose: str = "",
        model_description: str = "",
        scene_count: int = 3,
        usp: str = "",
    ) -> GenerationRequest:
        """mode: "photo" (image prompts) or "video" (full scripts)."""
        if mode == "photo":
            system_instruction = CreativePromptBuilder.bulk_photo_instruction(
                quantity, product_description, mood, pose, model_description,
            )
            instruction = f"Generate {quantity} variations now."
        elif mode == "video":
            system_instruction = CreativePromptBuilder.bulk_video_instruction(quantity, scene_count)
            instruction = (
                f"Product: {product_description}. USP: {usp}. Mood: {mood}. "
                f"Generate {quantity} full scripts."
            )
        else:
            raise ValueError(f"Unknown bulk mode: {mode}")
        return GenerationRequest(
            kind=JobKind.BULK_VARIATION,
            instruction=instruction,
            system_instruction=system_instruction,
            quantity=max(quantity, 1),
        )

    @staticmethod
    def studio_request(
        product_image: TaggedImage,
        style: str,
        aspect_ratio: AspectRatio,
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.IMAGE_SYNTHESIS,
            instruction=CreativePromptBuilder.studio_prompt(style, brand),
            images=(product_image,),
            aspect_ratio=aspect_ratio,
            quantity=quantity,
        )

    @staticmethod
    def composite_request(
        images: Sequence[TaggedImage],
        instruction: str,
        aspect_ratio: AspectRatio,
        brand: Optional[BrandProfile] = None,
        quantity: int = 1,
    ) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.IMAGE_SYNTHESIS,
            instruction=CreativePromptBuilder.composite_prompt(instruction, brand),
            images=tuple(images),
            aspect_ratio=aspect_ratio,
            quantity=quantity,
        )

    @staticmethod
    def scene_visual_request(
        scene_prompt: str,
        aspect_ratio: AspectRatio,
        product_image: Optional[TaggedImage] = None,
        model_image: Optional[TaggedImage] = None,
    ) -> GenerationRequest:
        images = tuple(img for img in (product_image, model_image) if img is not None)
        return GenerationRequest(
            kind=JobKind.IMAGE_SYNTHESIS,
            instruction=CreativePromptBuilder.scene_visual_prompt(scene_prompt),
            images=images,
            aspect_ratio=aspect_ratio,
        )

    @staticmethod
    def video_request(
        start_frame: TaggedImage,
        motion: str,
        aspect_ratio: AspectRatio,
        brand: Optional[BrandProfile] = None,
    ) -> GenerationRequest:
        return GenerationRequest(
            kind=JobKind.VIDEO_SYNTHESIS,
            instruction=CreativePromptBuilder.motion_prompt(motion, brand),
            images=(start_frame,),
            aspect_ratio=aspect_ratio,
        )
