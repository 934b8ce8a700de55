"""HTTP API for agrigeo."""

from .routes import get_geodata_services, router

__all__ = ["get_geodata_services", "router"]
