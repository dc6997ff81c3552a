# app/models/analysis.py
"""
Modèle AnalysisRecord - Historique des comparaisons d'offres
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, JSON
from app.database import Base


class AnalysisRecord(Base):
    __tablename__ = "analyses"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    date = Column(String(32), nullable=False, comment="Date d'affichage localisée")
    needs_summary = Column(Text, nullable=False, default="")
    market_analysis = Column(Text, nullable=False, default="")
    best_option = Column(String(500), nullable=False, comment="Recommandation algorithmique")
    offers = Column(JSON, nullable=False, default=list, comment="Offres normalisées")
    status = Column(
        String(20),
        nullable=False,
        default="pending",
        index=True,
        comment="pending | completed",
    )
    winning_supplier = Column(String(500), nullable=True, comment="Choix humain à la clôture")
    evaluation = Column(JSON, nullable=True)
    language = Column(String(5), nullable=False, default="fr")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    closed_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<AnalysisRecord(id='{self.id}', status='{self.status}', best='{self.best_option}')>"

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def supplier_names(self) -> list[str]:
        return [offer.get("supplierName", "") for offer in (self.offers or [])]
