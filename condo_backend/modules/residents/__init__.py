"""Resident records attached to apartments."""

from .models import Resident

__all__ = ["Resident"]
