"""General-purpose tools (mocked weather and current time)."""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from logic.tools.registry import ToolDef


class WeatherArgs(BaseModel):
    model_config = ConfigDict(
        extra="ignore", json_schema_extra={"additionalProperties": False}
    )

    location: str = Field(..., description='City and country, e.g. "San Francisco, US"')
    unit: Literal["c", "f"] = "c"


class TimeArgs(BaseModel):
    model_config = ConfigDict(
        extra="ignore", json_schema_extra={"additionalProperties": False}
    )

    timezone: str | None = Field(None, description="IANA or label (for display only).")


async def get_current_weather(args: WeatherArgs) -> dict[str, Any]:
    celsius = 22
    fahrenheit = round(celsius * 9 / 5 + 32)
    return {
        "location": args.location,
        "unit": args.unit,
        "temperature": fahrenheit if args.unit == "f" else celsius,
        "condition": "sunny",
        "source": "mock",
    }


async def get_current_time(args: TimeArgs) -> dict[str, Any]:
    return {
        "iso": datetime.now(UTC).isoformat(timespec="milliseconds"),
        "timezone": args.timezone or "UTC",
    }


def build_utility_tools() -> list[ToolDef]:
    return [
        ToolDef(
            name="get_current_weather",
            description="Get current weather for a location (mocked data).",
            arguments_model=WeatherArgs,
            handler=get_current_weather,
        ),
        ToolDef(
            name="get_current_time",
            description=(
                "Get the current time (ISO string). Optionally specify a timezone "
                "label (not applied)."
            ),
            arguments_model=TimeArgs,
            handler=get_current_time,
        ),
    ]
