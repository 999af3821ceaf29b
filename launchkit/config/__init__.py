"""Configuration management with Pydantic models."""

from .settings import LaunchkitSettings

__all__ = ["LaunchkitSettings"]
