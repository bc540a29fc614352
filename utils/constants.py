"""
ADSTUDIO 공통 상수 모듈

프롬프트 빌더, 생성 클라이언트, 오케스트레이터가 공유하는 상수를 단일 소스로 관리합니다.
config/studio.yaml 값이 없을 때의 기본값이기도 합니다.
"""

# ─── Gemini / Veo 모델명 ──────────────────────────────────
MODEL_GEMINI_TEXT = "gemini-3-flash-preview"
MODEL_GEMINI_IMAGE = "gemini-2.5-flash-image"
MODEL_VEO_VIDEO = "veo-3.1-fast-generate-preview"

VIDEO_RESOLUTION = "720p"

# ─── Orchestration ────────────────────────────────────────
BATCH_WINDOW = 4
POLL_INTERVAL_SEC = 5.0
MAX_STORYBOARD_SCENES = 5

# ─── Credentials ──────────────────────────────────────────
API_KEY_ENV = "GOOGLE_API_KEY"
CREDENTIAL_ERROR_SIGNATURE = "Requested entity was not found"

# ─── Tags (positional image roles) ────────────────────────
TAG_PRODUCT = "@img1"
TAG_MODEL = "@img2"

# ─── Selector sentinels from the studio UI ────────────────
AUTO_MODEL = "Auto-Detect based on Product"
AUTO_POSE = "Let AI Decide (Auto)"
SMART_POSE_MARKER = "Smart Adaptive"

# ─── Fallback / user-facing text ──────────────────────────
DEFAULT_CATEGORY = "General"
DEFAULT_MOTION_PROMPT = "Cinematic movement, high quality."
CREATIVE_PROMPT_FALLBACK = "Gagal membuat prompt."
CREDENTIAL_ADVISORY = "API Key invalid or not selected properly. Please try again."
UNEXPECTED_ERROR_BANNER = "An unexpected error occurred during generation."
STUDIO_TOTAL_FAILURE = "No image generated"
COMPOSITE_TOTAL_FAILURE = "No composite images generated"

# ─── Category → action (order matters: first match wins) ──
CATEGORY_ACTIONS = [
    (("shoe", "footwear"),
     "Low angle shot, showing the model's legs/feet walking or dynamic movement with the shoes."),
    (("skincare", "cosmetic"),
     "Close up portrait, model holding product near face, flawless skin texture."),
    (("clothing", "fashion", "apparel"),
     "Medium or Full shot, model wearing the product, confident fashion pose."),
    (("beverage", "food"),
     "Model holding the item ready to consume/drink, enjoying the moment."),
]
DEFAULT_ACTION = "Natural interaction with the product in a lifestyle setting."

# ─── Target gender → model context ────────────────────────
GENDER_MODEL_CONTEXT = {
    "masculine": "Male Model",
    "feminine": "Female Model",
}
NEUTRAL_MODEL_CONTEXT = "Professional Model (Neutral)"
