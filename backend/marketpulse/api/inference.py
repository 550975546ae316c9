from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from marketpulse.api.deps import get_orchestrator, to_http_error
from marketpulse.core.exceptions import MarketPulseError
from marketpulse.services.sentiment_orchestrator import SentimentOrchestrator

router = APIRouter()


class ModelSelection(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class TextSentimentRequest(BaseModel):
    text: str = Field(..., min_length=1)


class TextSentimentResponse(BaseModel):
    score: float
    summary: str
    model_name: str


@router.get("", response_model=list[str])
async def list_models(orchestrator: SentimentOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.list_models()
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc


@router.get("/current", response_model=ModelSelection)
async def get_current_model(orchestrator: SentimentOrchestrator = Depends(get_orchestrator)):
    return ModelSelection(name=orchestrator.current_model())


@router.put("/current", response_model=ModelSelection)
async def set_current_model(
    payload: ModelSelection,
    orchestrator: SentimentOrchestrator = Depends(get_orchestrator),
):
    try:
        orchestrator.set_model(payload.name)
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return ModelSelection(name=orchestrator.current_model())


@router.post("/sentiment", response_model=TextSentimentResponse)
async def analyze_text(
    payload: TextSentimentRequest,
    orchestrator: SentimentOrchestrator = Depends(get_orchestrator),
):
    """Score free text with the current model; nothing is stored."""
    model = orchestrator.current_model()
    try:
        score, summary = await orchestrator.analyze_text(payload.text)
    except MarketPulseError as exc:
        raise to_http_error(exc) from exc
    return TextSentimentResponse(score=score, summary=summary, model_name=model)
