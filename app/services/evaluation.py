# app/services/evaluation.py
"""
Service d'évaluation - Clôture d'un dossier par une évaluation humaine
du fournisseur retenu (score global pondéré sur 5).
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.models.analysis import AnalysisRecord
from app.schemas.evaluation import EvaluationCreate, SupplierEvaluation
from app.services.deduplicator import supplier_key
from app.services.suppliers import SupplierRegistryService

logger = logging.getLogger(__name__)


class AnalysisAlreadyClosedError(Exception):
    """Le dossier a déjà été clôturé"""


class UnknownWinningSupplierError(Exception):
    """Le fournisseur retenu ne fait pas partie des offres"""


class EvaluationService:
    """Clôture des analyses"""

    # Pondérations des critères d'évaluation
    CRITERIA_WEIGHTS = {
        "cost": 0.35,         # 35% - Coût
        "quality": 0.20,      # 20% - Qualité
        "deadlines": 0.15,    # 15% - Service & délais
        "technical": 0.15,    # 15% - Capacité technique & financière
        "management": 0.10,   # 10% - Management
        "innovation": 0.05,   # 5%  - Innovation
    }

    def __init__(self, db: Session):
        self.db = db
        self.registry = SupplierRegistryService(db)

    @classmethod
    def compute_global_score(cls, criteria) -> float:
        """Score global /5, arrondi à 2 décimales"""
        total = sum(
            getattr(criteria, name, 0) * weight
            for name, weight in cls.CRITERIA_WEIGHTS.items()
        )
        return round(total, 2)

    def close_analysis(self, record: AnalysisRecord, data: EvaluationCreate) -> AnalysisRecord:
        """
        Clôture l'analyse : statut completed, fournisseur retenu, évaluation.
        Le fournisseur retenu peut différer de la recommandation algorithmique.
        """
        if record.is_completed:
            raise AnalysisAlreadyClosedError(record.id)

        winner_key = supplier_key(data.supplier_name)
        winner = next(
            (name for name in record.supplier_names if supplier_key(name) == winner_key),
            None,
        )
        if winner is None:
            raise UnknownWinningSupplierError(data.supplier_name)

        evaluation = SupplierEvaluation(
            analysis_id=record.id,
            supplier_name=winner,
            criteria=data.criteria,
            comment=data.comment,
            global_score=self.compute_global_score(data.criteria),
        )

        record.status = "completed"
        record.winning_supplier = winner
        record.evaluation = evaluation.model_dump(by_alias=True)
        record.closed_at = datetime.utcnow()

        self.registry.record_evaluation(winner, evaluation.global_score, record.date)

        self.db.commit()
        self.db.refresh(record)
        logger.info(
            f"✅ Analyse {record.id} clôturée: {winner} retenu "
            f"(score {evaluation.global_score}/5, recommandé: {record.best_option})"
        )
        return record
