from typing import Optional, Sequence

from ..models import WeatherSummary


def build_crop_suggestion_prompt(
    summary: WeatherSummary,
    user_location: Optional[str] = None,
    current_crops: Optional[Sequence[str]] = None,
) -> str:
    current_crops_text = (
        f"Current crops being grown: {', '.join(current_crops)}"
        if current_crops else "No current crop information provided"
    )
    windows = ", ".join(summary.best_planting_periods) or "None identified"
    location_text = f"Additional Location Info: {user_location}" if user_location else ""

    return f"""
You are an expert agricultural consultant. Based on the weather forecast data provided, suggest the best crops to plant in the coming weeks.

WEATHER ANALYSIS FOR: {summary.location}
Current Conditions: {summary.current_conditions}
Forecast Summary:
- Average Temperature: {summary.average_temperature}°C
- Expected Rainfall: {summary.total_rainfall}mm (average {summary.average_rainfall}mm/day)
- Average Humidity: {summary.average_humidity}%
- Rainy Days: {summary.rainy_days}
- Dry Days: {summary.dry_days}
- Best Planting Windows: {windows}

{location_text}
{current_crops_text}

Please provide your response in the following JSON format:
{{
  "suggestions": [
    {{
      "cropName": "crop name",
      "variety": "specific variety if applicable",
      "plantingTimeframe": "when to plant (e.g., 'Next 2-3 weeks', 'End of this month')",
      "reasonForSuggestion": "why this crop is good for current conditions",
      "expectedHarvestTime": "when to expect harvest",
      "wateringRequirements": "irrigation needs based on weather",
      "soilPreparation": "soil prep recommendations",
      "potentialYield": "expected yield range",
      "marketDemand": "High/Medium/Low"
    }}
  ],
  "generalAdvice": "overall farming advice for the period",
  "riskFactors": ["list of potential weather or environmental risks to watch for"]
}}

IMPORTANT GUIDELINES:
1. Suggest 3-5 appropriate crops maximum
2. Consider the specific climate patterns shown in the forecast
3. Prioritize crops that will thrive in the predicted conditions
4. Include both food crops and cash crops where appropriate
5. Consider water availability based on rainfall predictions
6. If rainfall is high, suggest crops that can handle moisture
7. If rainfall is low, suggest drought-resistant varieties
8. Consider seasonal appropriateness for the region

Provide only the JSON response, no additional text.
"""


def build_area_detection_prompt(
    expected_crop_type: Optional[str] = None,
    area_hint: Optional[float] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> str:
    crop_info = f"Expected crop type: {expected_crop_type}" if expected_crop_type else "Crop type: Unknown"
    area_info = f"Approximate farm area hint: {area_hint} square meters" if area_hint else ""
    location_info = (
        f"Location: {latitude:.4f}, {longitude:.4f}"
        if latitude is not None and longitude is not None else ""
    )

    return f"""
You are an agricultural AI expert analyzing a satellite image to detect crop areas.

TASK: Detect and measure cultivated crop areas in this satellite image.

IMAGE CONTEXT:
{crop_info}
{area_info}
{location_info}

ANALYSIS REQUIREMENTS:
1. Identify all visible cultivated/agricultural areas (fields, plots, crop areas)
2. Distinguish between crops and other features (buildings, roads, water, forest, bare land)
3. Estimate the total cultivated area in square meters
4. Provide confidence level (0.0 to 1.0)
5. Identify crop type if possible
6. Describe what you see

RESPONSE FORMAT (JSON only):
{{
  "detectedAreaSqm": number,
  "confidence": number,
  "cropType": "string or null",
  "description": "detailed description of what you see",
  "boundingBox": {{
    "topLeft": {{"x": number, "y": number}},
    "topRight": {{"x": number, "y": number}},
    "bottomLeft": {{"x": number, "y": number}},
    "bottomRight": {{"x": number, "y": number}}
  }}
}}

Be conservative in measurements if uncertain.
Respond ONLY with valid JSON. No additional text outside the JSON.
"""
