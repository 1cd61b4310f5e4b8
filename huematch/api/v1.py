"""
HueMatch v1 API Routes
Implements palette analysis, direct suggestions and saved palette endpoints.
"""
import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, Header, HTTPException, Query, UploadFile

from huematch.schemas import (
    AnalysisDebug, AnalyzeResponse, ErrorResponse, DominantColorOut, PairingGroupOut,
    PaletteListResponse, SavedPaletteOut, SavePaletteRequest, SuggestRequest,
    ToneSwatch,
)
from huematch.services.colors.conversions import hex_to_rgb, rgb_to_hsv
from huematch.services.colors.palette import Palette, build_palette, palette_to_document
from huematch.services.colors.swatches import render_palette_swatch, swatch_entry
from huematch.services.imaging import ImageDecodeError, validate_file_upload
from huematch.services.palette_store import PaletteStore, PaletteStoreError, SavedPalette, get_palette_store
from huematch.services.session import AnalysisSession
from huematch.utils.ids import generate_request_id
from huematch.utils.logging import get_logger
from huematch.utils.metrics import get_metrics

logger = get_logger()
router = APIRouter(prefix="/v1", tags=["Palettes"])

USER_ERRORS = {401: {"model": ErrorResponse, "description": "Missing X-User-Id header"}}
STORE_ERRORS = {502: {"model": ErrorResponse, "description": "Palette store unavailable"}}


def get_user_id(x_user_id: str = Header(None, alias="X-User-Id")) -> str:
    """Resolve the calling user from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_store() -> PaletteStore:
    """Dependency wrapper so tests can override the store."""
    return get_palette_store()


def palette_response(palette: Palette) -> Dict[str, Any]:
    """Shape a palette for the presentation layer."""
    h, s, v = rgb_to_hsv(*palette.dominant)
    return {
        "dominant": DominantColorOut(
            hex=palette.dominant_hex,
            rgb=list(palette.dominant),
            hsv={"h": round(h, 2), "s": round(s, 4), "v": round(v, 4)},
        ),
        "suggestions": {
            theory: PairingGroupOut(
                theory=group.theory.value,
                explanation=group.explanation,
                colors=[ToneSwatch(**swatch_entry(variant)) for variant in group.colors],
            )
            for theory, group in palette.suggestions.items()
        },
    }


def saved_palette_out(saved: SavedPalette) -> SavedPaletteOut:
    document = palette_to_document(saved.palette)
    return SavedPaletteOut(
        id=saved.id,
        timestamp=saved.timestamp,
        dominantHex=saved.dominant_hex,
        dominant=document["dominant"],
        suggestions=document["suggestions"],
    )


@router.post("/analyze", response_model=AnalyzeResponse,
             responses={
                 **USER_ERRORS,
                 **STORE_ERRORS,
                 415: {"model": ErrorResponse, "description": "Unsupported media type"},
                 422: {"model": ErrorResponse, "description": "Image cannot be analyzed"},
             },
             summary="Analyze Image Palette",
             description="Extract the dominant color of an image and suggest theory-based pairings")
async def analyze(
    file: UploadFile = File(..., description="Image to analyze"),
    return_swatch: bool = Query(True, description="Generate swatch artifact"),
    save: bool = Query(False, description="Save the palette after analysis"),
    user_id: str = Depends(get_user_id),
    store: PaletteStore = Depends(get_store),
) -> AnalyzeResponse:
    request_id = generate_request_id("analyze")
    start_time = time.time()
    metrics = get_metrics()
    log = logger.bind(request_id=request_id)

    log.info(f"Palette analysis request {request_id} started", extra={
        "user_id": user_id,
        "filename": file.filename,
        "content_type": file.content_type
    })

    validate_file_upload(file)

    try:
        file_bytes = await file.read()
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    session = AnalysisSession(user_id)
    try:
        session.load_image(file_bytes)
    except ImageDecodeError as e:
        log.warning(f"Palette analysis request {request_id} could not decode image", extra={
            "error": str(e)
        })
        metrics.record_failure("analyze", "decode")
        raise HTTPException(status_code=422, detail=f"Cannot analyze image: {str(e)}")

    try:
        analysis_start = time.time()
        result = session.analyze()
        analysis_time = time.time() - analysis_start

        swatch_b64 = None
        swatch_time = 0.0
        if return_swatch:
            swatch_start = time.time()
            swatch_b64 = render_palette_swatch(result.palette)
            swatch_time = time.time() - swatch_start

        saved_id = None
        if save:
            saved_id = session.save(store).id
            metrics.record_palette_saved()

    except PaletteStoreError as e:
        metrics.record_failure("analyze", "store")
        raise HTTPException(status_code=502, detail=f"Failed to save palette: {str(e)}")

    except Exception as e:
        log.exception(f"Palette analysis request {request_id} failed", extra={
            "error": str(e)
        })
        metrics.record_failure("analyze", "internal")
        raise HTTPException(
            status_code=500,
            detail="Failed to analyze image. Please try a different file."
        )

    total_time = time.time() - start_time
    metrics.record_analysis(total_time * 1000, result.fallback_used)

    log.info(f"Palette analysis request {request_id} completed", extra={
        "dominant_hex": result.palette.dominant_hex,
        "fallback_used": result.fallback_used,
        "saved_id": saved_id,
        "total_time_ms": round(total_time * 1000, 2)
    })

    return AnalyzeResponse(
        **palette_response(result.palette),
        swatch_png_b64=swatch_b64,
        saved_id=saved_id,
        debug=AnalysisDebug(
            request_id=request_id,
            fallback_used=result.fallback_used,
            sampled_pixels=result.sampled_pixels,
            kept_pixels=result.kept_pixels,
            timing_ms={
                "analysis": round(analysis_time * 1000, 2),
                "swatch": round(swatch_time * 1000, 2),
                "total": round(total_time * 1000, 2)
            },
        ),
    )


@router.post("/suggest", response_model=AnalyzeResponse,
             summary="Suggest Pairings",
             description="Suggest theory-based pairings for a known dominant color")
def suggest(
    body: SuggestRequest,
    return_swatch: bool = Query(False, description="Generate swatch artifact"),
) -> AnalyzeResponse:
    if body.base_hex is not None:
        try:
            dominant = hex_to_rgb(body.base_hex)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    else:
        dominant = tuple(body.rgb)

    palette = build_palette(dominant)
    get_metrics().record_suggestion()

    return AnalyzeResponse(
        **palette_response(palette),
        swatch_png_b64=render_palette_swatch(palette) if return_swatch else None,
    )


@router.get("/palettes", response_model=PaletteListResponse,
            responses={**USER_ERRORS, **STORE_ERRORS},
            summary="List Saved Palettes")
def list_palettes(
    user_id: str = Depends(get_user_id),
    store: PaletteStore = Depends(get_store),
) -> PaletteListResponse:
    try:
        saved = store.query(user_id)
    except PaletteStoreError as e:
        raise HTTPException(status_code=502, detail=f"Error loading saved palettes: {str(e)}")

    return PaletteListResponse(
        palettes=[saved_palette_out(item) for item in saved],
        count=len(saved),
    )


@router.post("/palettes", response_model=SavedPaletteOut, status_code=201,
             responses={
                 **USER_ERRORS,
                 **STORE_ERRORS,
                 400: {"model": ErrorResponse, "description": "Invalid palette document"},
             },
             summary="Save Palette")
def save_palette(
    body: SavePaletteRequest,
    user_id: str = Depends(get_user_id),
    store: PaletteStore = Depends(get_store),
) -> SavedPaletteOut:
    try:
        saved = store.put(user_id, body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid palette document: {str(e)}")
    except PaletteStoreError as e:
        raise HTTPException(status_code=502, detail=f"Failed to save palette: {str(e)}")

    get_metrics().record_palette_saved()
    return saved_palette_out(saved)


@router.get("/metrics", summary="Service Metrics")
def metrics_summary() -> Dict[str, Any]:
    return get_metrics().snapshot()
