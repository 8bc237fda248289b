"""Condominium registry: condominiums, blocks and apartments."""

from .models import Apartment, Block, Condominium

__all__ = [
    "Condominium",
    "Block",
    "Apartment",
]
