from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Optional, Sequence, Tuple

from psiconorm.assessments.enums import InstrumentType
from psiconorm.core.config import settings
from psiconorm.core.errors import NormativeStoreUnavailableError
from psiconorm.core.logging import get_logger
from psiconorm.core.metrics import count_calls, inc_counter, timer
from psiconorm.db.repositories.normative import CriterionFilter, NormativeTableRecord
from psiconorm.db.repositories.protocols import NormativeStore
from psiconorm.engine.norms.criteria import criterion_matches
from psiconorm.engine.norms.value_objects import ScoringCriteria, TableResolution
from psiconorm.engine.registry import InstrumentProfile, get_profile
from psiconorm.i18n.pt_messages import WarningMessages

logger = get_logger("psiconorm.engine.norms.resolver", component="norms")

_MAX_CANDIDATES = 5


class NormativeTableResolver:
    """Pick the normative table (and companions) for an evaluation.

    Priority among active tables, ascending id within each step:
    1. exact match on the most specific criterion the instrument declares;
    2. the table flagged generic;
    3. the first active table.
    An explicit table id bypasses the priority entirely.
    """

    def __init__(self, store: NormativeStore, *, fallback_enabled: bool | None = None):
        self.store = store
        self.fallback_enabled = settings.store_fallback_enabled if fallback_enabled is None else fallback_enabled

    def _list_tables(self, instrument: InstrumentType) -> Tuple[List[NormativeTableRecord], List[str]]:
        try:
            return self.store.list_active_tables(instrument), []
        except NormativeStoreUnavailableError as exc:
            if not self.fallback_enabled:
                raise
            logger.warning(
                "norm_table_listing_failed",
                extra={"structured_data": {"instrument": instrument.value, "error": exc.message}},
            )
            inc_counter("norms.resolver.fallback_queries")
            tables = self.store.list_active_tables(instrument, CriterionFilter.generic())
            return tables, [WarningMessages.STORE_FALLBACK_USED]

    @count_calls("norms.resolver.calls")
    def resolve(
        self,
        instrument: InstrumentType | str,
        criteria: ScoringCriteria | None = None,
        explicit_table_id: int | None = None,
    ) -> Optional[TableResolution]:
        """Resolve the table for ``instrument``.

        Returns ``None`` when the instrument has no active table. Raises
        ``NormativeStoreUnavailableError`` only when both the listing and its
        generic fallback fail.
        """
        profile = get_profile(instrument)
        criteria = criteria or ScoringCriteria()
        with timer("norms.resolver.resolve"):
            tables, warnings = self._list_tables(profile.instrument)
            if explicit_table_id is not None:
                chosen, reason = self._explicit(profile, tables, explicit_table_id, warnings)
            else:
                if not tables:
                    logger.info(
                        "norm_table_not_found",
                        extra={"structured_data": {"instrument": profile.instrument.value, **criteria.as_dict()}},
                    )
                    return None
                chosen, reason = self._by_priority(profile, tables, criteria)
            companions = self._companions(profile, tables, chosen, warnings)
        logger.debug(
            "norm_table_resolved",
            extra={
                "structured_data": {
                    "instrument": profile.instrument.value,
                    "table_id": chosen.table_id,
                    "reason": reason,
                    "companions": {tag: table.table_id for tag, table in companions.items()},
                }
            },
        )
        return TableResolution(
            table=chosen,
            reason=reason,
            companions=MappingProxyType(companions),
            candidates=self._rank(profile, tables, criteria),
            warnings=tuple(warnings),
        )

    def _explicit(
        self,
        profile: InstrumentProfile,
        tables: Sequence[NormativeTableRecord],
        table_id: int,
        warnings: List[str],
    ) -> Tuple[NormativeTableRecord, str]:
        for table in tables:
            if table.table_id == table_id:
                return table, "explicit"
        warnings.append(WarningMessages.EXPLICIT_TABLE_INACTIVE.format(table_id=table_id))
        placeholder = NormativeTableRecord(
            table_id=table_id,
            name=f"#{table_id}",
            instrument=profile.instrument.value,
            version="",
            criterion=None,
            criterion_value=None,
            subscale=None,
            is_generic=False,
            description=None,
            active=False,
        )
        return placeholder, "explicit"

    def _by_priority(
        self,
        profile: InstrumentProfile,
        tables: Sequence[NormativeTableRecord],
        criteria: ScoringCriteria,
    ) -> Tuple[NormativeTableRecord, str]:
        for dimension in profile.criterion_axes:
            requested = criteria.value_for(dimension)
            if requested is None:
                continue
            for table in tables:
                if table.criterion == dimension.value and criterion_matches(table.criterion_value, requested):
                    return table, f"criterion:{dimension.value}"
        for table in tables:
            if table.is_generic:
                return table, "generic"
        return tables[0], "first_active"

    def _companions(
        self,
        profile: InstrumentProfile,
        tables: Sequence[NormativeTableRecord],
        chosen: NormativeTableRecord,
        warnings: List[str],
    ) -> Dict[str, NormativeTableRecord]:
        if not profile.companion_tables or chosen.subscale is None:
            return {}
        companions: Dict[str, NormativeTableRecord] = {}
        for table in tables:
            if table.subscale is None or table.subscale in companions:
                continue
            if (
                table.criterion == chosen.criterion
                and table.criterion_value == chosen.criterion_value
                and table.is_generic == chosen.is_generic
                and table.version == chosen.version
            ):
                companions[table.subscale] = table
        companions[chosen.subscale] = chosen
        if len(companions) < len(profile.subscales):
            warnings.append(WarningMessages.COMPANIONS_NOT_FOUND)
        return companions

    def _rank(
        self,
        profile: InstrumentProfile,
        tables: Sequence[NormativeTableRecord],
        criteria: ScoringCriteria,
    ) -> Tuple[int, ...]:
        """Rank tables for display as suggestions; more specific matches first."""
        axis_count = len(profile.criterion_axes)
        scored: List[Tuple[int, int]] = []
        for table in tables:
            score = 0
            for position, dimension in enumerate(profile.criterion_axes):
                requested = criteria.value_for(dimension)
                if table.criterion == dimension.value and criterion_matches(table.criterion_value, requested):
                    score = max(score, (axis_count - position + 1) * 100)
            if table.is_generic:
                score = max(score, 100)
            scored.append((score, table.table_id))
        scored.sort(key=lambda item: (-item[0], item[1]))
        return tuple(table_id for _, table_id in scored[:_MAX_CANDIDATES])


__all__ = ["NormativeTableResolver"]
