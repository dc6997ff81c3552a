"""
Schemas Pydantic - Validation et sérialisation
"""
from app.schemas.offer import Offer, ComparisonBody, Priority, Language
from app.schemas.evaluation import EvaluationCriteria, EvaluationCreate, SupplierEvaluation
from app.schemas.supplier import SupplierCreate, SupplierUpdate, SupplierResponse
from app.schemas.analysis import (
    AnalysisResponse, AnalysisListResponse, OfferView, OfferListResponse,
    OfferScore, ScoreBreakdownResponse,
)
