from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "CriteriaWrite",
    "ScoreRequest",
    "SubscaleRead",
    "ScoreResponse",
    "TableSummary",
    "NormativeRowRead",
    "TableDetail",
]


class CriteriaWrite(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    region: Optional[str] = Field(default=None, alias="regiao")
    education: Optional[str] = Field(default=None, alias="escolaridade")
    age: Optional[int | str] = Field(default=None, alias="idade")
    sex: Optional[str] = Field(default=None, alias="sexo")
    context: Optional[str] = Field(default=None, alias="contexto")
    criterion_value: Optional[str] = Field(default=None, alias="valor_criterio")
    evaluation_context: Optional[str] = Field(default=None, alias="contexto_avaliacao")

    def as_criteria_mapping(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class ScoreRequest(BaseModel):
    raw_inputs: Dict[str, Any] = Field(default_factory=dict, alias="dados")
    criteria: Optional[CriteriaWrite] = Field(default=None, alias="criterios")
    table_id: Optional[int] = Field(default=None, ge=1, alias="tabela_id")

    model_config = ConfigDict(populate_by_name=True)


class SubscaleRead(BaseModel):
    subscale: str
    raw_score: Optional[int | float]
    percentile: Optional[int]
    classification: str
    table_id: Optional[int] = None
    provenance: str


class ScoreResponse(BaseModel):
    instrument: str
    raw_scores: Dict[str, Optional[int | float]]
    percentile: Optional[int]
    classification: str
    resolved_table_id: Optional[int]
    subscales: Dict[str, SubscaleRead] = Field(default_factory=dict)
    display_percentage: Optional[float] = None
    interpretation: Optional[Dict[str, Any]] = None
    warnings: List[str] = Field(default_factory=list)
    suggestions: List[int] = Field(default_factory=list)


class TableSummary(BaseModel):
    table_id: int
    name: str
    instrument: str
    version: str
    criterion: Optional[str] = None
    criterion_value: Optional[str] = None
    subscale: Optional[str] = None
    is_generic: bool = False
    description: Optional[str] = None
    active: bool = True


class NormativeRowRead(BaseModel):
    row_id: int
    subscale: Optional[str] = None
    criterion_value: Optional[str] = None
    lower_bound: float
    upper_bound: Optional[float] = None
    percentile: int
    classification: str


class TableDetail(TableSummary):
    rows: List[NormativeRowRead] = Field(default_factory=list)
