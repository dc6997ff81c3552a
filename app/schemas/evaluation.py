# app/schemas/evaluation.py
"""
Schemas pour l'évaluation finale (clôture d'un dossier)
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class EvaluationCriteria(BaseModel):
    """Notes de 0 à 5 par critère"""
    cost: float = Field(3, ge=0, le=5, description="Compétitivité des prix, respect du budget")
    quality: float = Field(3, ge=0, le=5, description="Adéquation aux exigences, fiabilité")
    deadlines: float = Field(3, ge=0, le=5, description="Respect des délais, réactivité")
    technical: float = Field(3, ge=0, le=5, description="Capacité technique et financière")
    management: float = Field(3, ge=0, le=5, description="Communication, gestion relationnelle")
    innovation: float = Field(3, ge=0, le=5, description="Force de proposition, conseil")


class EvaluationCreate(BaseModel):
    """Requête de clôture"""
    supplier_name: str = Field(..., min_length=1, description="Fournisseur retenu")
    criteria: EvaluationCriteria = Field(default_factory=EvaluationCriteria)
    comment: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class SupplierEvaluation(EvaluationCreate):
    """Évaluation persistée avec le score global pondéré"""
    analysis_id: str | None = None
    global_score: float = Field(..., ge=0, le=5)
