"""ISRIC SoilGrids 2.0 client for topsoil properties.

Queries the SoilGrids properties endpoint for pH, clay, sand and silt at the
0-5cm depth band and reduces each property to a single scalar.

No API key required. SoilGrids is rate limited per client; requests reach
this service only through the soil geodata cache.
"""

import logging
from typing import Any, Optional

import httpx

from agrigeo.models import SOIL_SOURCE, SoilProperties, UpstreamError

logger = logging.getLogger(__name__)

# SoilGrids property name -> payload field
SOIL_PROPERTIES = {
    "phh2o": "ph",
    "clay": "clay",
    "sand": "sand",
    "silt": "silt",
}

SOIL_DEPTH = "0-5cm"


def pick_mean(prop: Any) -> Optional[float]:
    """Reduce a SoilGrids property to one value.

    Takes the first depth band and prefers its ``mean`` statistic, falling
    back to ``median``. Returns None when neither is present or the
    structure is not what SoilGrids normally sends.
    """
    if not isinstance(prop, dict):
        return None
    depths = prop.get("depths")
    if not isinstance(depths, list) or not depths:
        return None
    first = depths[0]
    values = first.get("values") if isinstance(first, dict) else None
    if not isinstance(values, dict):
        return None
    if values.get("mean") is not None:
        return values["mean"]
    return values.get("median")


def _index_properties(data: Any) -> dict[str, Any]:
    """Map property name -> property dict.

    SoilGrids v2 nests properties under ``properties.layers`` as a list of
    named layers; some mirrors key them by name directly. Both are accepted,
    with directly keyed entries taking precedence.
    """
    if not isinstance(data, dict):
        return {}
    properties = data.get("properties")
    if not isinstance(properties, dict):
        return {}

    indexed: dict[str, Any] = {}
    layers = properties.get("layers")
    if isinstance(layers, list):
        for layer in layers:
            if isinstance(layer, dict) and layer.get("name"):
                indexed[layer["name"]] = layer
    for name in SOIL_PROPERTIES:
        if name in properties:
            indexed[name] = properties[name]
    return indexed


def normalize_soil_response(data: Any) -> SoilProperties:
    """Map a SoilGrids response onto ``SoilProperties``."""
    indexed = _index_properties(data)
    values = {field: pick_mean(indexed.get(name)) for name, field in SOIL_PROPERTIES.items()}
    return SoilProperties(**values, source=SOIL_SOURCE)


class SoilGridsService:
    """SoilGrids REST client.

    A fresh ``httpx.AsyncClient`` is opened per query; the cache in front
    of this service keeps the call rate low.
    """

    SOILGRIDS_URL = "https://rest.isric.org/soilgrids/v2.0/properties/query"

    HEADERS = {"User-Agent": "Agrigeo/1.0 (contact@agrigeo.app)"}

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    def build_params(self, lat: str, lng: str) -> list[tuple[str, str]]:
        """Query parameters for a point, coordinates passed through verbatim."""
        params = [("lat", lat), ("lon", lng)]
        params.extend(("property", name) for name in SOIL_PROPERTIES)
        params.append(("depth", SOIL_DEPTH))
        return params

    async def fetch_properties(self, lat: str, lng: str) -> SoilProperties:
        """Fetch and normalize soil properties at (lat, lng).

        Raises:
            UpstreamError: SoilGrids answered with a non-success status or
                did not answer within the timeout.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                transport=self._transport,
            ) as client:
                response = await client.get(self.SOILGRIDS_URL, params=self.build_params(lat, lng))
        except httpx.TimeoutException as e:
            logger.warning(f"[SOIL] SoilGrids timed out for {lat},{lng}")
            raise UpstreamError("soilgrids", "request timed out") from e

        if not response.is_success:
            logger.warning(f"[SOIL] SoilGrids returned {response.status_code} for {lat},{lng}")
            raise UpstreamError(
                "soilgrids",
                f"unexpected status {response.status_code}",
                upstream_status=response.status_code,
            )

        return normalize_soil_response(response.json())
