"""Shoreline Woodworks website backend."""
