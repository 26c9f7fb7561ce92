import json
import logging
from typing import Any, Dict

import google.generativeai as genai

from ...application.ports.vision_provider import VisionProvider
from ...exceptions import UpstreamError

logger = logging.getLogger(__name__)

VISION_PROMPT = """
You are an image-understanding service. Describe the provided image.

**IMPORTANT: Respond ONLY with valid JSON in the exact format below. Do not include any other text.**

{
    "objects": [{"object": "cat", "confidence": 0.92}],
    "description": {"captions": [{"text": "a cat sitting on a sofa", "confidence": 0.87}]},
    "faces": [{"age": 31, "gender": "female"}],
    "categories": [{"name": "animal_cat", "score": 0.95}],
    "tags": [{"name": "indoor", "confidence": 0.98}],
    "color": {"dominantColorForeground": "White", "dominantColorBackground": "Grey", "isBWImg": false},
    "imageType": {"clipArtType": 0, "lineDrawingType": 0},
    "brands": [{"name": "Nike"}]
}

Use lowercase tag names. Use an empty list when nothing of a kind is present.
Category names follow the "<group>_<detail>" convention, e.g. "people_portrait", "outdoor_mountain".
"""


def extract_json(text: str) -> Dict[str, Any]:
    """Pull the outermost JSON object out of a model reply."""
    json_start = text.find("{")
    json_end = text.rfind("}") + 1
    if json_start == -1 or json_end == 0:
        raise ValueError("No valid JSON found in response")
    data = json.loads(text[json_start:json_end])
    if not isinstance(data, dict):
        raise ValueError("Vision response is not a JSON object")
    return data


class GeminiVisionProvider(VisionProvider):
    def __init__(self, api_key: str, model_name: str, timeout_seconds: float) -> None:
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.timeout_seconds = timeout_seconds

    def analyze(self, image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
        logger.info("Analyzing image with Gemini vision model")
        try:
            result = self.model.generate_content(
                [VISION_PROMPT, {"mime_type": mime_type, "data": image_bytes}],
                request_options={"timeout": self.timeout_seconds},
            )
            text = getattr(result, "text", str(result))
        except Exception as e:
            logger.error(f"Vision analysis failed: {e}")
            raise UpstreamError() from e

        try:
            return extract_json(text)
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Failed to parse vision response as JSON: {e}")
            raise UpstreamError() from e
