from fastapi import HTTPException, Request, status

from marketpulse.core.exceptions import (
    AnalysisFailedError,
    ConfigurationError,
    MarketPulseError,
    PersistenceError,
)
from marketpulse.services.sentiment_orchestrator import SentimentOrchestrator


def get_orchestrator(request: Request) -> SentimentOrchestrator:
    """The process-wide orchestrator created at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis engine not initialized",
        )
    return orchestrator


def error_status(exc: MarketPulseError) -> int:
    cause = exc.cause if isinstance(exc, AnalysisFailedError) else exc
    if isinstance(cause, ConfigurationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(cause, PersistenceError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_502_BAD_GATEWAY


def to_http_error(exc: MarketPulseError) -> HTTPException:
    return HTTPException(status_code=error_status(exc), detail=str(exc))
