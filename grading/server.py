"""FastAPI application wiring for the grading engine."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

from . import schemas
from .calculator import grade_records
from .config import EngineConfig
from .overview import build_class_overview
from .weights import WeightProfile, WeightValidationError


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    app = FastAPI(default_response_class=ORJSONResponse)
    config = config or EngineConfig()
    bander = config.build_bander()

    app.state.config = config
    app.state.bander = bander

    @app.exception_handler(WeightValidationError)
    async def weight_validation_handler(request: Request, exc: WeightValidationError) -> ORJSONResponse:
        return ORJSONResponse(
            status_code=422,
            content={
                "error": exc.to_dict(),
                "generated_at": _now_iso(),
            },
        )

    @app.get("/api/categories", response_model=List[schemas.CategoryInfo])
    async def api_categories() -> List[schemas.CategoryInfo]:
        return [
            schemas.CategoryInfo(
                category=category,
                label=category.label,
                default_weight=config.default_weights.get(category, 0.0),
            )
            for category in schemas.AssessmentCategory
        ]

    @app.post("/api/weights/validate", response_model=schemas.WeightValidationResponse)
    async def api_validate_weights(payload: schemas.WeightsPayload) -> schemas.WeightValidationResponse:
        profile = config.profile_from_weights(payload.weights)
        return schemas.WeightValidationResponse(
            valid=True,
            total=profile.total,
            weights=profile.weights,
        )

    @app.post("/api/grades/compute", response_model=schemas.OverallGrade)
    async def api_compute_grade(payload: schemas.ComputeGradeRequest) -> schemas.OverallGrade:
        profile = config.profile_from_weights(payload.weights)
        return grade_records(payload.records, profile, bander)

    @app.post("/api/grades/overview", response_model=schemas.ClassOverview)
    async def api_class_overview(payload: schemas.ClassOverviewRequest) -> schemas.ClassOverview:
        profiles: Dict[str, WeightProfile] = {
            cs_id: config.profile_from_weights(weights, cs_id)
            for cs_id, weights in payload.profiles.items()
        }
        return build_class_overview(payload.records, profiles, bander)

    return app
