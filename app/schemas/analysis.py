# app/schemas/analysis.py
"""
Schemas pour les analyses comparatives (historique)
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.schemas.evaluation import SupplierEvaluation
from app.schemas.offer import ComparisonBody, Offer


class AnalysisResponse(ComparisonBody):
    """Résultat d'analyse persisté"""
    id: str
    date: str
    status: Literal["pending", "completed"] = "pending"
    winning_supplier: str | None = None
    evaluation: SupplierEvaluation | None = None
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "AnalysisResponse":
        return cls(
            id=record.id,
            title=record.title,
            date=record.date,
            needs_summary=record.needs_summary,
            market_analysis=record.market_analysis,
            offers=record.offers or [],
            best_option=record.best_option,
            status=record.status,
            winning_supplier=record.winning_supplier,
            evaluation=record.evaluation,
            created_at=record.created_at,
        )


class AnalysisListResponse(BaseModel):
    """Historique paginé"""
    total: int
    skip: int
    limit: int
    analyses: list[AnalysisResponse]


class OfferView(Offer):
    """Offre avec indicateurs d'affichage"""
    recommended: bool = False
    winner: bool = False


class OfferListResponse(BaseModel):
    analysis_id: str
    sort: str
    filter: str
    total: int
    offers: list[OfferView]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class OfferScore(BaseModel):
    """Détail du score composite d'une offre"""
    supplier_name: str
    price_score: float
    technical_score: float
    compliance_score: float
    delivery_score: float
    composite_score: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ScoreBreakdownResponse(BaseModel):
    analysis_id: str
    priority: str
    weights: dict[str, float]
    best_option: str
    scores: list[OfferScore] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
