"""
Catalog Module - Known equipment identities and their reference text.

The catalog is static: loaded once at startup, read-only afterwards.
Its identities are the candidates every observation is ranked against.
"""

from .equipment import EquipmentCatalog, EquipmentEntry
from .lab import LAB_EQUIPMENT, create_lab_catalog

__all__ = [
    "EquipmentCatalog",
    "EquipmentEntry",
    "LAB_EQUIPMENT",
    "create_lab_catalog",
]
