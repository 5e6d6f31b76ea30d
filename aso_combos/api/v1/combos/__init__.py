"""Combo analysis API package."""

from aso_combos.api.v1.combos.routes import router

__all__ = ["router"]
