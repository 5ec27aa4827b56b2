"""Outfit analysis and recommendation endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import BaseModel

from outfit_advisor.core.image_encoder import is_remote
from outfit_advisor.core.models import (
    AnalysisResult,
    CompleteOutfitAnalysis,
    RecommendationResult,
)
from outfit_advisor.core.orchestrator import OutfitOrchestrator

router = APIRouter()


def get_orchestrator(request: Request) -> OutfitOrchestrator:
    return request.app.state.orchestrator


class AnalyzeRequest(BaseModel):
    """Request for URL- or base64-based analysis."""

    image_url: Optional[str] = None
    image_base64: Optional[str] = None


def _image_uri(image_url: Optional[str], image_base64: Optional[str]) -> str:
    """Pick the image reference, wrapping bare base64 as a data URI."""
    if image_url:
        # Server-side paths are never read on behalf of a client
        if not is_remote(image_url):
            raise HTTPException(status_code=400, detail="image_url must be an http(s) URL")
        return image_url
    if image_base64:
        if image_base64.startswith("data:"):
            return image_base64
        return f"data:;base64,{image_base64}"
    raise HTTPException(
        status_code=400,
        detail="No image provided. Send file, image_url, or image_base64",
    )


def _dump(result: BaseModel) -> dict:
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/analyze")
async def analyze_outfit(
    file: Optional[UploadFile] = File(None),
    image_url: Optional[str] = Form(None),
    image_base64: Optional[str] = Form(None),
    orchestrator: OutfitOrchestrator = Depends(get_orchestrator),
):
    """
    Detect the clothing items in an outfit photo.

    Accepts image via:
    - File upload (multipart/form-data)
    - URL reference
    - Base64 encoded data

    Failures are reported as a fallback result with ``fallbackReason`` set.
    """
    if file:
        content = await file.read()
        analysis = await orchestrator.analyze_upload(
            content, mime_type=file.content_type, filename=file.filename
        )
    else:
        analysis = await orchestrator.analyze_image(_image_uri(image_url, image_base64))

    return _dump(analysis)


@router.post("/analyze/json")
async def analyze_outfit_json(
    request: AnalyzeRequest,
    orchestrator: OutfitOrchestrator = Depends(get_orchestrator),
):
    """Alternative endpoint accepting JSON instead of form data."""
    uri = _image_uri(request.image_url, request.image_base64)
    return _dump(await orchestrator.analyze_image(uri))


@router.post("/recommendations")
async def recommend(
    analysis: AnalysisResult,
    orchestrator: OutfitOrchestrator = Depends(get_orchestrator),
):
    """Style assessment, suggestions and terminology for an analysis."""
    result: RecommendationResult = await orchestrator.advisor.recommend(analysis)
    return _dump(result)


@router.post("/analysis/complete")
async def complete_analysis(
    analysis: AnalysisResult,
    orchestrator: OutfitOrchestrator = Depends(get_orchestrator),
):
    """Outfit items merged with their recommendations."""
    result: CompleteOutfitAnalysis = await orchestrator.get_complete_outfit_analysis(analysis)
    return _dump(result)
