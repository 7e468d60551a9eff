"""
Prediction API endpoints for the development backend.

POST /api/predict/{disease_type}   score one assessment
GET  /api/predictions/history      newest first
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.catalog import parse_assessment_type
from app.remote.mock_backend import MockBackend
from app.remote.wire import history_to_wire, prediction_to_wire
from app.schemas.health import PredictRequest, envelope
from auth.middleware import get_backend, get_required_token

router = APIRouter(prefix="/api", tags=["predictions"])


@router.post("/predict/{disease_type}")
async def predict(
    disease_type: str,
    request: PredictRequest,
    token: str = Depends(get_required_token),
    backend: MockBackend = Depends(get_backend),
):
    assessment_type = parse_assessment_type(disease_type)
    if assessment_type is None:
        return JSONResponse(status_code=404, content=envelope(404, "Invalid disease type"))

    result = backend.score(token, assessment_type, request.answers)
    return envelope(200, "Prediction generated successfully.", prediction_to_wire(result))


@router.get("/predictions/history")
async def history(
    token: str = Depends(get_required_token),
    backend: MockBackend = Depends(get_backend),
):
    entries = backend.get_history(token)
    return envelope(200, "Prediction history fetched successfully.", history_to_wire(entries))
