"""Static prompt presets served under ``/presets/{name}``."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PromptPreset(BaseModel):
    name: str
    instructions: str
    output_schema: Dict[str, Any] = Field(default_factory=dict)
    model: str
    requires_image: bool = True

    def render(self, extra_context: Optional[str] = None) -> str:
        parts = [self.instructions.strip()]
        if self.output_schema:
            parts.append("JSON Schema:\n\n" + json.dumps(self.output_schema, indent=2))
        if extra_context:
            parts.append("Additional context:\n\n" + extra_context.strip())
        return "\n\n".join(parts)


TREADMILL_INSTRUCTIONS = """
You are a fitness data extraction assistant. Analyze the treadmill display image and extract the workout metrics. \
Look for numbers associated with distance (miles/km), calories burned, workout time (minutes/hours), speed (mph/kmh). \
If a metric is not visible or unclear, set it to null. Return the data in the exact JSON format specified in the schema.

If not specified in the picture, assume calories burned (= energy consumed) has the unit kcal, distances are in km, \
speed is in kmh. Convert the values accordingly to match the json schema.

Be very concise and ONLY return the JSON object, without any additional text or explanation. \
Ensure the JSON is valid and adheres to the schema.
"""

TREADMILL_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Workout Data",
    "type": "object",
    "properties": {
        "energy_consumed_joule": {
            "type": ["number", "null"],
            "description": "Total energy converted during workout in Joule (aka. calories burned)",
        },
        "workout_time_seconds": {
            "type": ["number", "null"],
            "description": "Total workout time in seconds",
        },
        "distance_metres": {
            "type": ["number", "null"],
            "description": "Distance covered in metres",
        },
        "speed_metres_per_second": {
            "type": ["number", "null"],
            "description": "Current or average speed in metres per second",
        },
        "confidence_level": {
            "type": "string",
            "enum": ["high", "medium", "low"],
            "description": "Confidence level of the extraction",
        },
    },
    "required": ["distance_metres", "confidence_level"],
    "additionalProperties": False,
}

PRESETS: Dict[str, PromptPreset] = {
    "treadmill": PromptPreset(
        name="treadmill",
        instructions=TREADMILL_INSTRUCTIONS,
        output_schema=TREADMILL_SCHEMA,
        model="meta-llama/llama-4-maverick:free",
    ),
}


def get_preset(name: str) -> Optional[PromptPreset]:
    return PRESETS.get(name)
