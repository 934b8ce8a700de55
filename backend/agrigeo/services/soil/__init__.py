"""SoilGrids soil properties service."""

from .service import SoilGridsService, normalize_soil_response, pick_mean

__all__ = ["SoilGridsService", "normalize_soil_response", "pick_mean"]
