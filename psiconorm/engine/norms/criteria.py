"""Demographic criteria normalisation and matching.

Stored criterion values come from several generations of population
scripts ("E. Médio", "Ensino Médio", "medio"...). Matching therefore folds
case and accents and understands age brackets such as ``16-23`` or
``18 a 64 anos``.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Dict, List, Optional, Tuple

from psiconorm.core.config import settings
from psiconorm.i18n.pt_messages import WarningMessages

__all__ = [
    "fold",
    "normalize_region",
    "normalize_education",
    "normalize_sex",
    "parse_age_bracket",
    "criterion_matches",
    "criteria_warnings",
]

_AGE_RANGE = re.compile(r"^\s*(\d{1,3})\s*(?:-|a|até|ate)\s*(\d{1,3})\s*(?:anos)?\s*$", re.IGNORECASE)
_AGE_OPEN = re.compile(r"^\s*(?:(\d{1,3})\s*\+|acima de\s*(\d{1,3}))\s*(?:anos)?\s*$", re.IGNORECASE)
_AGE_SINGLE = re.compile(r"^\s*(\d{1,3})\s*(?:anos)?\s*$", re.IGNORECASE)


def fold(value: str) -> str:
    """Lower-case, strip accents and collapse whitespace."""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.casefold().replace(".", " ").split())


_REGIONS: Dict[str, str] = {
    "norte": "Norte",
    "nordeste": "Nordeste",
    "centro-oeste": "Centro-Oeste",
    "centro oeste": "Centro-Oeste",
    "sudeste": "Sudeste",
    "sul": "Sul",
    "sao paulo": "São Paulo",
    "sp": "São Paulo",
}

_EDUCATION: Dict[str, str] = {
    "nao escolarizado": "Não Escolarizado",
    "fundamental": "Ensino Fundamental",
    "ensino fundamental": "Ensino Fundamental",
    "e fundamental": "Ensino Fundamental",
    "medio": "Ensino Médio",
    "ensino medio": "Ensino Médio",
    "e medio": "Ensino Médio",
    "superior": "Ensino Superior",
    "ensino superior": "Ensino Superior",
    "e superior": "Ensino Superior",
    "pos-graduacao": "Pós-Graduação",
    "pos graduacao": "Pós-Graduação",
}

_SEX: Dict[str, str] = {
    "m": "Masculino",
    "masculino": "Masculino",
    "f": "Feminino",
    "feminino": "Feminino",
}


def _canonical(value: Optional[str], table: Dict[str, str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return table.get(fold(text), text)


def normalize_region(value: Optional[str]) -> Optional[str]:
    return _canonical(value, _REGIONS)


def normalize_education(value: Optional[str]) -> Optional[str]:
    return _canonical(value, _EDUCATION)


def normalize_sex(value: Optional[str]) -> Optional[str]:
    return _canonical(value, _SEX)


def parse_age_bracket(value: str) -> Optional[Tuple[int, Optional[int]]]:
    """Return ``(low, high)`` for an age bracket label; ``high`` is None when open."""
    match = _AGE_RANGE.match(value)
    if match:
        return int(match.group(1)), int(match.group(2))
    match = _AGE_OPEN.match(value)
    if match:
        return int(match.group(1) or match.group(2)), None
    match = _AGE_SINGLE.match(value)
    if match:
        age = int(match.group(1))
        return age, age
    return None


def criterion_matches(stored: Optional[str], requested: Optional[str | int]) -> bool:
    """Whether a stored criterion value covers the requested one.

    Integers are ages and match brackets that contain them. Two bracket
    labels match when they cover the same ages (``"16-23"`` and
    ``"16 a 23 anos"``). Other strings are compared after folding, so
    ``"E. Médio"`` matches ``"e medio"``.
    """
    if stored is None or requested is None:
        return False
    if isinstance(requested, int) and not isinstance(requested, bool):
        bracket = parse_age_bracket(stored)
        if bracket is None:
            return False
        low, high = bracket
        return requested >= low and (high is None or requested <= high)
    requested_bracket = parse_age_bracket(str(requested))
    if requested_bracket is not None:
        return parse_age_bracket(stored) == requested_bracket
    return fold(str(stored)) == fold(str(requested))


def criteria_warnings(
    *,
    age: Optional[int | str],
    education: Optional[str],
    context: Optional[str],
) -> List[str]:
    """Advisory notes about criteria that fall outside standard norm coverage."""
    warnings: List[str] = []
    numeric_age = age if isinstance(age, int) and not isinstance(age, bool) else None
    if numeric_age is not None:
        if context and fold(context) in ("transito", "cnh") and numeric_age < settings.traffic_min_age:
            warnings.append(WarningMessages.TRAFFIC_UNDERAGE.format(min_age=settings.traffic_min_age))
        if numeric_age < settings.normative_age_min or numeric_age > settings.normative_age_max:
            warnings.append(
                WarningMessages.AGE_OUTSIDE_NORMS.format(
                    min_age=settings.normative_age_min, max_age=settings.normative_age_max
                )
            )
    if education and fold(education) == "nao escolarizado":
        warnings.append(WarningMessages.UNSCHOOLED_GENERAL_TABLE)
    return warnings
