# app/routers/suppliers.py
"""
Endpoints pour le référentiel fournisseurs
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.supplier import Supplier
from app.schemas.supplier import SupplierCreate, SupplierResponse, SupplierUpdate
from app.services.suppliers import SupplierRegistryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/suppliers",
    tags=["Fournisseurs"],
)


def _get_supplier_or_404(db: Session, supplier_id: int) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if not supplier:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Fournisseur #{supplier_id} non trouve")
    return supplier


@router.post(
    "",
    response_model=SupplierResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Creer un fournisseur",
)
def create_supplier(
    supplier_data: SupplierCreate,
    db: Session = Depends(get_db),
):
    existing = SupplierRegistryService(db).find_by_name(supplier_data.name)
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Le fournisseur '{supplier_data.name}' existe deja (id={existing.id})")
    supplier = Supplier(**supplier_data.model_dump(), rating_count=0)
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    logger.info(f"Fournisseur cree: {supplier.name} (id={supplier.id})")
    return supplier


@router.get("", response_model=list[SupplierResponse], summary="Lister les fournisseurs")
def list_suppliers(
    skip: int = 0,
    limit: int = 50,
    category: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    query = db.query(Supplier)
    if category:
        query = query.filter(Supplier.category.ilike(f"%{category}%"))
    if status_filter:
        query = query.filter(Supplier.status == status_filter)
    return query.order_by(Supplier.name).offset(skip).limit(limit).all()


@router.get("/{supplier_id}", response_model=SupplierResponse, summary="Detail d'un fournisseur")
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    return _get_supplier_or_404(db, supplier_id)


@router.put("/{supplier_id}", response_model=SupplierResponse, summary="Mettre a jour un fournisseur")
def update_supplier(supplier_id: int, update_data: SupplierUpdate, db: Session = Depends(get_db)):
    supplier = _get_supplier_or_404(db, supplier_id)
    update_dict = update_data.model_dump(exclude_unset=True)
    new_name = update_dict.get("name")
    if new_name and new_name.strip().lower() != supplier.name.strip().lower():
        existing = SupplierRegistryService(db).find_by_name(new_name)
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Le fournisseur '{new_name}' existe deja (id={existing.id})")
    for field, value in update_dict.items():
        setattr(supplier, field, value)
    db.commit()
    db.refresh(supplier)
    logger.info(f"Fournisseur mis a jour: {supplier.name}")
    return supplier


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer un fournisseur")
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    supplier = _get_supplier_or_404(db, supplier_id)
    db.delete(supplier)
    db.commit()
    logger.info(f"Fournisseur supprime: #{supplier_id}")
