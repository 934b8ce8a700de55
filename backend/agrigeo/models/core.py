"""Core data models for agrigeo.

Pydantic models for the normalized payloads returned by the geodata
endpoints. Upstream responses are mapped into these fixed shapes before
they are cached, so a cached value and a fresh one are indistinguishable.
"""

from typing import Optional

from pydantic import BaseModel, Field

SOIL_SOURCE = "SoilGrids 2.0"


class SoilProperties(BaseModel):
    """Topsoil (0-5cm) properties at a point.

    Values are reported in SoilGrids mapped units: pH x10 for ``ph`` and
    g/kg for the texture fractions. Any property SoilGrids could not
    provide is ``None``.
    """

    ph: Optional[float] = Field(None, description="pH in water (phh2o)")
    clay: Optional[float] = Field(None, description="Clay content")
    sand: Optional[float] = Field(None, description="Sand content")
    silt: Optional[float] = Field(None, description="Silt content")
    source: str = Field(SOIL_SOURCE, description="Upstream dataset attribution")


class Facility(BaseModel):
    """A point of interest near a land parcel."""

    id: str = Field(..., description="OpenStreetMap element id")
    name: str = Field(..., description="Display name")
    type: str = Field(..., description="Facility category (amenity, shop or waterway)")
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class FacilitiesResult(BaseModel):
    """Facilities found around a point."""

    facilities: list[Facility] = Field(default_factory=list)


class WeatherMain(BaseModel):
    temp: Optional[float] = None
    humidity: Optional[float] = None


class WeatherCondition(BaseModel):
    description: Optional[str] = None


class WeatherSummary(BaseModel):
    """Current conditions for a named location."""

    main: WeatherMain
    weather: list[WeatherCondition] = Field(default_factory=list)


class CropSuggestions(BaseModel):
    """Crops suited to a soil type."""

    soilType: str
    crops: list[str]
