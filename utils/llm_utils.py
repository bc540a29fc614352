"""
Gemini 응답 파싱 유틸리티

JSON 모드로 요청해도 모델이 마크다운 코드블록으로 감싸서 돌려주는 경우가 있어
파싱 전에 래핑을 벗겨냅니다.
"""
import json
from typing import Any


def strip_code_fence(text: str) -> str:
    """```json ... ``` / ``` ... ``` 래핑 제거. 순수 JSON은 그대로 반환."""
    text = (text or "").strip()
    if not text.startswith("```"):
        return text
    parts = text.split("```")
    if len(parts) >= 3:
        inner = parts[1]
        if inner.startswith("json"):
            inner = inner[4:]
        return inner.strip()
    # closing fence missing
    body = text.split("\n", 1)[1] if "\n" in text else text[3:]
    return body.strip()


def parse_llm_json(text: str) -> Any:
    """Parse a model response as JSON.

    Raises:
        json.JSONDecodeError: when the (unwrapped) text is not JSON, including
            the empty string.
    """
    return json.loads(strip_code_fence(text))
