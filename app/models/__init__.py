"""
Modèles SQLAlchemy - Import centralisé
"""
from app.models.analysis import AnalysisRecord
from app.models.supplier import Supplier

__all__ = ["AnalysisRecord", "Supplier"]
