# app/services/suppliers.py
"""
Référentiel fournisseurs : ajout automatique des nouveaux fournisseurs
après une comparaison, mise à jour de la note après clôture.
"""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.i18n import translate
from app.models.supplier import Supplier
from app.schemas.offer import Offer

logger = logging.getLogger(__name__)

DEFAULT_RATING = 3.0


class SupplierRegistryService:
    """Synchronisation du référentiel avec les analyses"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_name(self, name: str) -> Supplier | None:
        """Recherche insensible à la casse"""
        return self.db.query(Supplier).filter(
            func.lower(Supplier.name) == name.strip().lower()
        ).first()

    def sync_from_offers(self, offers: list[Offer], analysis_date: str, language: str) -> list[Supplier]:
        """
        Ajoute au référentiel les fournisseurs encore inconnus.
        Les fournisseurs déjà présents ne sont pas modifiés.
        """
        created = []
        for offer in offers:
            if self.find_by_name(offer.supplier_name):
                continue
            supplier = Supplier(
                name=offer.supplier_name,
                tax_id=offer.tax_id,
                category=translate(language, "default_supplier_category"),
                email=offer.email,
                phone=offer.phone,
                address=offer.address,
                rating=DEFAULT_RATING,
                rating_count=0,
                status="active",
                last_active_date=analysis_date,
            )
            self.db.add(supplier)
            # flush pour que le fournisseur soit visible par find_by_name
            self.db.flush()
            created.append(supplier)

        if created:
            logger.info(f"➕ {len(created)} nouveaux fournisseurs ajoutés au référentiel")
        return created

    def record_evaluation(self, name: str, global_score: float, analysis_date: str) -> Supplier | None:
        """Intègre la note d'évaluation dans la moyenne du fournisseur"""
        supplier = self.find_by_name(name)
        if supplier is None:
            logger.warning(f"⚠️ Fournisseur '{name}' absent du référentiel, note ignorée")
            return None

        count = supplier.rating_count or 0
        supplier.rating = round((supplier.rating * count + global_score) / (count + 1), 2)
        supplier.rating_count = count + 1
        supplier.last_active_date = analysis_date
        return supplier
