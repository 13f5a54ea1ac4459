"""Heat-transfer-fluid property models."""

from .properties import FluidId, HTFProperties

__all__ = ["FluidId", "HTFProperties"]
