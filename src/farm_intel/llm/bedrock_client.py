import json
import re
from typing import Any, Dict, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import AWS_REGION, LLM_MAX_TOKENS, LLM_MODEL, VISION_MODEL
from ..exceptions import LLMUnavailable
from ..utils.logger import logger

# Lazy initialization
_bedrock = None

_DATA_URL_RE = re.compile(r"^data:(image/[a-zA-Z0-9.+-]+);base64,", re.IGNORECASE)


def _get_bedrock_client():
    """Lazily initialize Bedrock client."""
    global _bedrock
    if _bedrock is None:
        logger.info(f"Initializing Bedrock client in region: {AWS_REGION}")
        _bedrock = boto3.client("bedrock-runtime", region_name=AWS_REGION)
    return _bedrock


def _invoke(model_id: str, content: List[Dict[str, Any]]) -> str:
    body = json.dumps({
        "anthropic_version": "bedrock-2023-05-31",
        "max_tokens": LLM_MAX_TOKENS,
        "messages": [
            {
                "role": "user",
                "content": content
            }
        ]
    })

    try:
        bedrock = _get_bedrock_client()
        response = bedrock.invoke_model(
            modelId=model_id,
            contentType="application/json",
            accept="application/json",
            body=body
        )
        result = json.loads(response["body"].read().decode())
        return "".join(
            block.get("text", "") for block in result.get("content", []) if block.get("type") == "text"
        )
    except (ClientError, BotoCoreError) as e:
        logger.error(f"Bedrock LLM error: {e}")
        raise LLMUnavailable(f"Bedrock call failed: {e}") from e
    except (KeyError, ValueError) as e:
        logger.error(f"Unexpected Bedrock response: {e}")
        raise LLMUnavailable(f"Unexpected Bedrock response: {e}") from e


def call_llm(prompt: str) -> str:
    """Send a text prompt and return the model's reply text."""
    logger.info(f"Calling LLM model: {LLM_MODEL}")
    return _invoke(LLM_MODEL, [{"type": "text", "text": prompt}])


def split_image_payload(image_base64: str):
    """Return (media_type, raw base64) for a bare or data-URL encoded image."""
    match = _DATA_URL_RE.match(image_base64)
    if match:
        return match.group(1).lower(), image_base64[match.end():]
    if "," in image_base64:
        return "image/jpeg", image_base64.split(",", 1)[1]
    return "image/jpeg", image_base64


def analyze_image(image_base64: str, prompt: str) -> str:
    """Send an image plus instructions to the vision model and return its reply."""
    media_type, data = split_image_payload(image_base64)
    logger.info(f"Calling vision model: {VISION_MODEL} ({media_type})")
    return _invoke(VISION_MODEL, [
        {
            "type": "image",
            "source": {"type": "base64", "media_type": media_type, "data": data},
        },
        {"type": "text", "text": prompt},
    ])
