"""
ADSTUDIO CLI - Command-line front end for the creative studio.

기능:
- 제품 분석 (Analyze)
- 스튜디오 촬영 컷 배치 생성 (Studio)
- 이미지 합성 배치 생성 (Composite)
- 스토리보드 씬별 비디오 생성 (Storyboard)
"""

import asyncio
import os
import sys
import uuid
from pathlib import Path
from typing import Optional

import requests

# Add parent directory to path for imports
sys.path.append(str(Path(__file__).parent.parent))

from schemas import BrandProfile, JobStatus, TaggedImage
from agents import NoEligibleScenesError, TotalFailureError, authorized_download_url
from pipeline import StudioPipeline
from utils.images import data_uri_to_bytes
from utils.constants import TAG_MODEL, TAG_PRODUCT


def print_banner():
    print("""
=====================================================================
                 ADSTUDIO - Creative Generation Studio
        Product analysis / Studio shots / Composites / Storyboards
=====================================================================
""")


def load_env():
    """Load environment variables from .env file."""
    from dotenv import load_dotenv
    load_dotenv()
    print("[OK] Environment variables loaded")


def ask(prompt: str, default: str = "") -> str:
    suffix = f" (default: {default})" if default else ""
    return input(f"{prompt}{suffix}: ").strip() or default


def ask_int(prompt: str, default: int, low: int, high: int) -> int:
    raw = ask(prompt, str(default))
    try:
        value = int(raw)
    except ValueError:
        print(f"[WARNING] Invalid number. Using {default}.")
        return default
    if value < low or value > high:
        print(f"[WARNING] Out of range ({low}-{high}). Using {default}.")
        return default
    return value


def ask_brand() -> Optional[BrandProfile]:
    if ask("Apply a brand profile? (y/N)", "n").lower() != "y":
        return None
    return BrandProfile(
        style=ask("  Brand style", "minimalist"),
        tone=ask("  Brand tone", "soft natural light"),
        contrast=ask("  Contrast", "medium"),
    )


def save_images(uris, output_dir: Path, prefix: str):
    output_dir.mkdir(parents=True, exist_ok=True)
    for i, uri in enumerate(uris, 1):
        path = output_dir / f"{prefix}_{i:02d}.png"
        path.write_bytes(data_uri_to_bytes(uri))
        print(f"  + {path}")


def download_video(uri: str, api_key: str, output_path: Path):
    """Fetch a Veo result for local viewing."""
    resp = requests.get(authorized_download_url(uri, api_key), timeout=300)
    resp.raise_for_status()
    output_path.write_bytes(resp.content)
    print(f"  + {output_path}")


async def run_analyze(pipeline: StudioPipeline):
    image = TaggedImage.from_path(ask("Product image path"), tag=TAG_PRODUCT)
    result = await pipeline.analyze(image)
    print(f"\n  Description: {result.description}")
    print(f"  USP: {result.usp}")
    print(f"  Category: {result.product_category}")
    print(f"  Target: {result.target_gender}")


async def run_studio(pipeline: StudioPipeline, output_dir: Path):
    image = TaggedImage.from_path(ask("Product image path"), tag=TAG_PRODUCT)
    style = ask("Studio style", "Clean white seamless backdrop")
    ratio = ask("Aspect ratio [1:1 / 9:16 / 16:9]", "1:1")
    quantity = ask_int("Quantity", 1, 1, 20)
    brand = ask_brand()
    uris = await pipeline.studio_shots(image, style, ratio, brand, quantity)
    print(f"\n{len(uris)}/{quantity} shot(s) generated")
    save_images(uris, output_dir, "studio")


async def run_composite(pipeline: StudioPipeline, output_dir: Path):
    images = [TaggedImage.from_path(ask("Product image path (@img1)"), tag=TAG_PRODUCT)]
    model_path = ask("Model image path (@img2, Enter to skip)")
    if model_path:
        images.append(TaggedImage.from_path(model_path, tag=TAG_MODEL))
    instruction = ask("Composition instruction", f"{TAG_MODEL} holding {TAG_PRODUCT} in a bright cafe")
    ratio = ask("Aspect ratio [1:1 / 3:4 / 4:3 / 16:9 / 9:16]", "9:16")
    quantity = ask_int("Quantity", 1, 1, 20)
    brand = ask_brand()
    uris = await pipeline.composites(images, instruction, ratio, brand, quantity)
    print(f"\n{len(uris)}/{quantity} composite(s) generated")
    save_images(uris, output_dir, "composite")


async def run_storyboard(pipeline: StudioPipeline, output_dir: Path):
    draft = pipeline.new_storyboard()
    while True:
        scene_no = len(draft.scenes)
        path = ask(f"Scene {scene_no} image path (Enter to leave empty)")
        motion = ask(f"Scene {scene_no} motion prompt")
        image = TaggedImage.from_path(path, tag="scene") if path else None
        draft.update_scene(draft.scenes[-1].scene_id, image=image, motion_prompt=motion)
        if ask("Add another scene? (y/N)", "n").lower() != "y" or draft.add_scene() is None:
            break

    ratio = ask("Aspect ratio [1:1 / 9:16 / 16:9]", "9:16")
    brand = ask_brand()
    run = await pipeline.storyboard(draft, ratio, brand)

    if run.error_message:
        print(f"\n[!] {run.error_message}")
    output_dir.mkdir(parents=True, exist_ok=True)
    api_key = pipeline.credentials.get_api_key()
    for i, result in enumerate(run.results, 1):
        print(f"  Scene {i}: {result.status.value}")
        if not (result.video_url and api_key):
            continue
        try:
            await asyncio.to_thread(download_video, result.video_url, api_key, output_dir / f"scene_{i:02d}.mp4")
        except requests.RequestException as e:
            print(f"  [WARNING] Scene {i} download failed: {e}")


FLOWS = {
    "1": ("Analyze product", run_analyze),
    "2": ("Studio shots", run_studio),
    "3": ("Composite", run_composite),
    "4": ("Storyboard video", run_storyboard),
}


def print_summary(label: str, settings: dict, output_dir: Path):
    print("\n" + "=" * 60)
    print("Configuration Summary:")
    print("=" * 60)
    print(f"  Flow: {label}")
    print(f"  Text model: {settings['models']['text']}")
    print(f"  Image model: {settings['models']['image']}")
    print(f"  Video model: {settings['models']['video']} ({settings['video']['resolution']})")
    print(f"  Batch window: {settings['batch']['window']}")
    print(f"  Output: {output_dir}")
    print("=" * 60 + "\n")


def on_item_settled(job):
    mark = "OK" if job.status == JobStatus.COMPLETED else "FAILED"
    print(f"  [{mark}] item {job.index + 1}")


def on_scene_update(run, result):
    print(f"  [scene {result.scene_id}] {result.status.value}")


def main():
    """Main CLI entry point."""
    print_banner()
    load_env()

    if not os.getenv("GOOGLE_API_KEY"):
        print("\n[WARNING] GOOGLE_API_KEY not found in environment.")
        print("          Set your API key in .env file or environment variables.\n")

    for key, (label, _) in FLOWS.items():
        print(f"  {key}) {label}")
    choice = ask("Select flow", "2")
    if choice not in FLOWS:
        print("[CANCELLED] Unknown flow.")
        return

    label, flow = FLOWS[choice]
    output_dir = Path("outputs") / uuid.uuid4().hex[:8]
    pipeline = StudioPipeline(on_item_settled=on_item_settled, on_scene_update=on_scene_update)
    print_summary(label, pipeline.settings, output_dir)

    if ask("Proceed? (Y/n)", "y").lower() != "y":
        print("[CANCELLED] Generation cancelled.")
        return

    try:
        if flow is run_analyze:
            asyncio.run(flow(pipeline))
        else:
            asyncio.run(flow(pipeline, output_dir))
        print(f"\n[DONE] {label}")

    except (TotalFailureError, NoEligibleScenesError) as e:
        print(f"\n[FAILED] {e}")
        sys.exit(1)

    except KeyboardInterrupt:
        print("\n\n[INTERRUPTED] Generation interrupted by user.")
        sys.exit(1)

    except Exception as e:
        print(f"\n\n[ERROR] {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
