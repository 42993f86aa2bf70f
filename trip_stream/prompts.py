"""System instruction sent with every trip request.

The instruction fixes the response contract the decoder relies on:
a Markdown narrative, the sentinel on its own, then a JSON object.
"""

from __future__ import annotations

from .domain.models import SENTINEL, LocationCategory

_SYSTEM_INSTRUCTION = """\
You are a creative and expert travel planner.
Plan a trip based on the user's request with a creative touch, local secrets, \
and "must-try" food recommendations.

STEP 1: Write a beautiful, creative travel plan in Markdown format. Use emojis \
and engaging headers.
STEP 2: End your plan with exactly this separator: {sentinel}
STEP 3: After the separator, provide the trip data in JSON format for the map. \
Do not write anything after the JSON.

Provide a "type" for icons.
Possible types: {types}.

The JSON structure MUST be:
{{
  "title": "Creative Trip Title",
  "destination": "Main Destination",
  "duration": "Duration",
  "locations": [
    {{
      "name": "Exact Landmark Name",
      "lat": latitude,
      "lng": longitude,
      "day": day_number,
      "description": "Short creative description",
      "type": "one_of_the_types_above"
    }}
  ]
}}

Respond in {language} for the plan, but keep JSON keys and "type" values in English.
Ensure coordinates are accurate.
"""


def location_types() -> list[str]:
    """Category labels the model may use for ``type``."""
    return [c.value for c in LocationCategory if c is not LocationCategory.GENERIC]


def build_system_instruction(language: str = "Thai", sentinel: str = SENTINEL) -> str:
    """Render the system instruction for a narrative language."""
    types = ", ".join(f'"{t}"' for t in location_types())
    return _SYSTEM_INSTRUCTION.format(sentinel=sentinel, types=types, language=language)
