"""Enumerations shared by the listing query layer."""
from __future__ import annotations
from enum import Enum


class BatchType(str, Enum):
    PRODUCT = 'product'
    PACKAGING_MATERIAL = 'packaging_material'


class SortOrder(str, Enum):
    ASC = 'ASC'
    DESC = 'DESC'


BATCH_TYPES = tuple(e.value for e in BatchType)
SORT_ORDERS = tuple(e.value for e in SortOrder)


def normalize_batch_type(value: str | None) -> BatchType | None:
    if value is None:
        return None
    if isinstance(value, BatchType):
        return value
    v = str(value).strip().lower()
    if not v:
        return None
    try:
        return BatchType(v)
    except ValueError:
        return None


def normalize_sort_order(value: str | None, default: SortOrder = SortOrder.DESC) -> SortOrder:
    """Map any input onto ASC/DESC; unrecognised values yield ``default``."""
    if value is None:
        return default
    if isinstance(value, SortOrder):
        return value
    v = str(value).strip().upper()
    if v in SORT_ORDERS:
        return SortOrder(v)
    return default
