"""Pydantic models for CPU temperature readings."""

from pydantic import BaseModel, ConfigDict, Field

# Raw per-core readings in degrees Celsius, in the order the tool reported them
TemperatureSample = list[float]


class AggregateStats(BaseModel):
    """Summary of one poll of per-core CPU temperatures."""

    model_config = ConfigDict(frozen=True)

    core_count: int = Field(..., description="Number of cores with a reading", ge=0)
    max: float = Field(..., description="Highest core temperature in Celsius")
    min: float = Field(..., description="Lowest core temperature in Celsius")
    avg: float = Field(..., description="Mean core temperature in Celsius")


class SensorNode(BaseModel):
    """One node of the OpenHardwareMonitor ``data.json`` sensor tree.

    Hardware, sensor groups ("Temperatures", "Clocks", ...) and individual
    sensors all share this shape; leaves have no children.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(None, description="Node id assigned by the monitor")
    text: str = Field("", alias="Text", description="Display label")
    min: str = Field("", alias="Min", description="Minimum seen, with unit")
    value: str = Field("", alias="Value", description="Current value, with unit")
    max: str = Field("", alias="Max", description="Maximum seen, with unit")
    image_url: str = Field("", alias="ImageURL", description="Icon path")
    children: list["SensorNode"] = Field(default_factory=list, alias="Children")
