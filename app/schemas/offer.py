# app/schemas/offer.py
"""
Schemas du domaine : offre fournisseur normalisée et corps de résultat
"""

from typing import Literal
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

Priority = Literal["price", "quality", "deadline"]
Language = Literal["fr", "en"]


class Offer(BaseModel):
    """Offre d'un fournisseur, après normalisation"""
    supplier_name: str = Field(..., min_length=1)
    tax_id: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None

    price_excl_tax: float = Field(0.0, ge=0, description="Montant HT dans la devise cible")
    price_incl_tax: float = Field(0.0, ge=0, description="Montant TTC dans la devise cible")
    currency: str

    original_price_excl_tax: float | None = Field(None, ge=0)
    original_price_incl_tax: float | None = Field(None, ge=0)
    original_currency: str | None = None

    warranty_months: int = Field(0, ge=0, le=120)
    delivery_days: int = Field(0, ge=0, le=365)
    technical_score: int = Field(60, ge=0, le=100)
    compliance_score: int = Field(60, ge=0, le=100)

    strengths: list[str] = Field(default_factory=list, max_length=6)
    weaknesses: list[str] = Field(default_factory=list, max_length=6)
    recommendation: str = ""
    main_specs: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ComparisonBody(BaseModel):
    """Résultat complet avant persistance (sans id, date ni statut)"""
    title: str
    needs_summary: str
    offers: list[Offer]
    best_option: str
    market_analysis: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
