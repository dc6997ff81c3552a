# app/routers/analyses.py
"""
Endpoints pour les comparaisons d'offres, l'historique et la clôture
"""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.dependencies import get_comparison_service
from app.exceptions import CacheKeyError
from app.i18n import resolve_language
from app.models.analysis import AnalysisRecord
from app.schemas.analysis import (
    AnalysisListResponse,
    AnalysisResponse,
    OfferListResponse,
    OfferScore,
    OfferView,
    ScoreBreakdownResponse,
)
from app.schemas.evaluation import EvaluationCreate
from app.schemas.offer import Language, Offer, Priority
from app.services.comparison import ComparisonRequest, ComparisonService
from app.services.evaluation import (
    AnalysisAlreadyClosedError,
    EvaluationService,
    UnknownWinningSupplierError,
)
from app.services.file_encoder import Attachment
from app.services.offer_views import (
    DEFAULT_SORT,
    filter_offers,
    is_offer_recommended,
    is_offer_winner,
    sort_offers,
)
from app.services.ranker import OfferRanker
from app.services.suppliers import SupplierRegistryService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/analyses",
    tags=["Analyses"],
)


def _read_attachments(files: list[UploadFile], language: str) -> list[Attachment]:
    """Lit les fichiers uploadés ; un fichier illisible bloque avant l'extraction."""
    attachments = []
    for upload in files:
        filename = upload.filename or "fichier"
        try:
            # Lecture bornée : un octet de plus suffit à détecter le dépassement
            content = upload.file.read(settings.MAX_UPLOAD_BYTES + 1)
        except OSError as e:
            logger.error(f"❌ Lecture impossible de {filename}: {e}")
            raise CacheKeyError(language, filename) from e
        if len(content) > settings.MAX_UPLOAD_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Le fichier '{filename}' dépasse {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} Mo.",
            )
        attachments.append(Attachment(
            filename=filename,
            content_type=upload.content_type or "application/octet-stream",
            content=content,
        ))
    return attachments


def _get_record_or_404(db: Session, analysis_id: str) -> AnalysisRecord:
    record = db.get(AnalysisRecord, analysis_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Analyse #{analysis_id} non trouvée",
        )
    return record


@router.post(
    "",
    response_model=AnalysisResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Lancer une comparaison d'offres",
    description="Analyse les documents fournis, normalise et classe les offres, puis enregistre le résultat.",
)
def create_analysis(
    title: str = Form(..., min_length=1),
    needs_text: str = Form(""),
    manual_specs: str = Form(""),
    requirement_files: list[UploadFile] = File(default=[]),
    offer_files: list[UploadFile] = File(default=[]),
    rate_eur: float | None = Form(None, gt=0),
    rate_usd: float | None = Form(None, gt=0),
    target_currency: str | None = Form(None),
    language: Language | None = Form(None),
    priority: Priority = Form("price"),
    service: ComparisonService = Depends(get_comparison_service),
    db: Session = Depends(get_db),
):
    """POST /analyses - Comparaison complète"""
    language = resolve_language(language or settings.DEFAULT_LANGUAGE)

    request = ComparisonRequest(
        title=title.strip(),
        needs_text=needs_text,
        manual_specs=manual_specs,
        requirement_files=_read_attachments(requirement_files, language),
        offer_files=_read_attachments(offer_files, language),
        exchange_rates={
            **settings.default_exchange_rates,
            **({"EUR": rate_eur} if rate_eur else {}),
            **({"USD": rate_usd} if rate_usd else {}),
        },
        target_currency=(target_currency or settings.DEFAULT_CURRENCY).strip().upper(),
        language=language,
        priority=priority,
    )

    result = service.run(request)

    record = AnalysisRecord(
        id=result.id,
        title=result.title,
        date=result.date,
        needs_summary=result.needs_summary,
        market_analysis=result.market_analysis,
        best_option=result.best_option,
        offers=[offer.model_dump(by_alias=True, exclude_none=True) for offer in result.offers],
        status="pending",
        language=language,
    )
    db.add(record)
    SupplierRegistryService(db).sync_from_offers(result.offers, result.date, language)
    db.commit()
    db.refresh(record)

    logger.info(f"📊 Analyse {record.id} enregistrée ({len(result.offers)} offres)")
    return AnalysisResponse.from_record(record)


@router.get(
    "",
    response_model=AnalysisListResponse,
    summary="Historique des analyses",
)
def list_analyses(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    status_filter: Literal["pending", "completed"] | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """GET /analyses - Plus récentes d'abord"""
    query = db.query(AnalysisRecord)
    if status_filter:
        query = query.filter(AnalysisRecord.status == status_filter)

    total = query.count()
    records = query.order_by(AnalysisRecord.created_at.desc()).offset(skip).limit(limit).all()

    return AnalysisListResponse(
        total=total,
        skip=skip,
        limit=limit,
        analyses=[AnalysisResponse.from_record(record) for record in records],
    )


@router.get("/{analysis_id}", response_model=AnalysisResponse, summary="Détail d'une analyse")
def get_analysis(analysis_id: str, db: Session = Depends(get_db)):
    return AnalysisResponse.from_record(_get_record_or_404(db, analysis_id))


@router.delete("/{analysis_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Supprimer une analyse")
def delete_analysis(analysis_id: str, db: Session = Depends(get_db)):
    record = _get_record_or_404(db, analysis_id)
    db.delete(record)
    db.commit()
    logger.info(f"Analyse supprimée: #{analysis_id}")


@router.get(
    "/{analysis_id}/offers",
    response_model=OfferListResponse,
    summary="Offres triées et filtrées",
)
def list_offers(
    analysis_id: str,
    sort: Literal["price_asc", "price_desc", "delivery_asc", "technical_desc", "compliance_desc"] = Query(DEFAULT_SORT),
    offer_filter: Literal["all", "recommended", "winner"] = Query("all", alias="filter"),
    db: Session = Depends(get_db),
):
    """GET /analyses/{id}/offers - Vue d'affichage avec badges"""
    result = AnalysisResponse.from_record(_get_record_or_404(db, analysis_id))

    offers = sort_offers(
        filter_offers(result.offers, result.best_option, result.winning_supplier, offer_filter),
        sort,
    )
    views = [
        OfferView(
            **offer.model_dump(),
            recommended=is_offer_recommended(offer, result.best_option),
            winner=is_offer_winner(offer, result.winning_supplier),
        )
        for offer in offers
    ]
    return OfferListResponse(
        analysis_id=result.id,
        sort=sort,
        filter=offer_filter,
        total=len(views),
        offers=views,
    )


@router.get(
    "/{analysis_id}/scores",
    response_model=ScoreBreakdownResponse,
    summary="Détail du classement pondéré",
)
def get_scores(
    analysis_id: str,
    priority: Priority = Query("price"),
    db: Session = Depends(get_db),
):
    """GET /analyses/{id}/scores - Scores composites par offre"""
    record = _get_record_or_404(db, analysis_id)
    offers = [Offer.model_validate(offer) for offer in record.offers or []]

    ranker = OfferRanker(priority)
    return ScoreBreakdownResponse(
        analysis_id=record.id,
        priority=ranker.priority,
        weights=ranker.weights,
        best_option=ranker.find_best_option(offers),
        scores=[OfferScore(**score) for score in ranker.score_offers(offers)],
    )


@router.post(
    "/{analysis_id}/evaluation",
    response_model=AnalysisResponse,
    summary="Clôturer une analyse",
    description="Enregistre le fournisseur retenu et son évaluation. Une analyse ne se clôture qu'une fois.",
)
def close_analysis(
    analysis_id: str,
    evaluation: EvaluationCreate,
    db: Session = Depends(get_db),
):
    """POST /analyses/{id}/evaluation"""
    record = _get_record_or_404(db, analysis_id)

    try:
        record = EvaluationService(db).close_analysis(record, evaluation)
    except AnalysisAlreadyClosedError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"L'analyse #{analysis_id} est déjà clôturée",
        )
    except UnknownWinningSupplierError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"'{evaluation.supplier_name}' ne fait pas partie des offres de l'analyse",
        )

    return AnalysisResponse.from_record(record)
