import json

from .agents.orchestrator import build_farm_report, detect_crop_area
from .llm.bedrock_client import call_llm
from .models import CropEntity, to_json_dict
from .utils.logger import logger

# CORS headers for API Gateway responses
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _response(status_code, body):
    return {
        "statusCode": status_code,
        "headers": CORS_HEADERS,
        "body": json.dumps(body)
    }


def _flag(value, default=True):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() == "true"


def _number(value):
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _handle_area_detection(body):
    image = body.get("image") or body.get("image_base64")
    if not image:
        return _response(400, {"error": "image is required for area detection."})

    result = detect_crop_area(
        image,
        expected_crop_type=body.get("crop_type"),
        area_hint=_number(body.get("area_hint")),
        latitude=_number(body.get("latitude")),
        longitude=_number(body.get("longitude")),
    )
    return _response(200, to_json_dict(result))


def lambda_handler(event, context):
    logger.info(event)

    try:
        # Support both POST (JSON body) and GET (query string)
        if event.get("body"):
            body = json.loads(event["body"])
            if body.get("action") == "detect_area":
                return _handle_area_detection(body)
            location = body.get("location")
            crops = [CropEntity.from_record(r) for r in body.get("crops") or []]
            use_ai = _flag(body.get("use_ai"))
        elif event.get("queryStringParameters"):
            params = event["queryStringParameters"]
            location = params.get("location")
            crops = []
            use_ai = _flag(params.get("use_ai"))
        else:
            return _response(400, {"error": "No location provided. Use POST with JSON body or GET with query parameter."})

        if not location:
            return _response(400, {"error": "location parameter is required."})

        report = build_farm_report(
            location,
            crops,
            llm=call_llm if use_ai else None,
            current_crops=[c.crop_type for c in crops if c.crop_type] or None,
        )
        return _response(200, to_json_dict(report))

    except Exception as e:
        logger.error(f"Error processing request: {e}")
        return _response(500, {"error": str(e)})
