from __future__ import annotations

from .norms import NormativeRow, NormativeTable

__all__ = [
    "NormativeRow",
    "NormativeTable",
]
