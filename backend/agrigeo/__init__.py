"""Agrigeo: cached soil, facilities and weather data for land listings."""
