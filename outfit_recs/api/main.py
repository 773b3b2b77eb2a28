"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from outfit_recs.api.schemas import RecommendationRequest, RecommendationResponse
from outfit_recs.config.settings import Settings, get_settings
from outfit_recs.monitoring.logging import configure_logging
from outfit_recs.services.recommendation import RecommendationService


def create_app(settings: Settings | None = None) -> FastAPI:
    """Initialise the FastAPI application."""

    settings = settings or get_settings()
    configure_logging()
    service = RecommendationService(settings)

    app = FastAPI(
        title="Outfit Recommendation API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
    )
    app.state.recommendation_service = service

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness probes."""

        return {"status": "ok"}

    @app.get("/metrics", tags=["system"])
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.post(
        "/recommendations",
        response_model=RecommendationResponse,
        response_model_exclude_none=True,
        tags=["recommendations"],
    )
    def recommend(request: RecommendationRequest) -> dict:
        """Rank the submitted outfits for the requested date."""

        if request.k is not None and request.k > settings.max_k:
            raise HTTPException(status_code=422, detail=f"k must not exceed {settings.max_k}")
        try:
            result = service.recommend(
                [event.to_domain() for event in request.events],
                [outfit.to_domain() for outfit in request.outfits],
                request.prefs.to_domain(),
                request.target_date,
                k=request.k,
                wear_history=[wear.to_domain() for wear in request.wear_history],
            )
        except (TypeError, ValueError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return result.to_payload(include_breakdown=request.include_breakdown)

    return app


app = create_app()
