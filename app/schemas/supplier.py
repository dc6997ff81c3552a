# app/schemas/supplier.py
"""
Schemas pour le référentiel fournisseurs
"""

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field


class SupplierBase(BaseModel):
    """Champs communs"""
    name: str = Field(..., min_length=1, max_length=255, description="Raison sociale")
    tax_id: str | None = Field(None, max_length=100, description="Identifiant fiscal (NIF)")
    category: str = Field("Général", max_length=255)
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    rating: float = Field(3.0, ge=0, le=5)
    status: Literal["active", "inactive"] = "active"


class SupplierCreate(SupplierBase):
    """Création d'un fournisseur"""
    pass


class SupplierUpdate(BaseModel):
    """Mise à jour partielle"""
    name: str | None = Field(None, min_length=1, max_length=255)
    tax_id: str | None = None
    category: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    rating: float | None = Field(None, ge=0, le=5)
    status: Literal["active", "inactive"] | None = None


class SupplierResponse(SupplierBase):
    """Réponse API"""
    id: int
    rating_count: int = 0
    last_active_date: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
