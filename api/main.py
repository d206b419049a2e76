from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import EstimateResponse, ProgramResponse, ReportRequest
from api.pdf_report import build_report_pdf, report_filename
from calculator_models import FormAnswers
from config import configure_logging, get_settings
from estimate_engine import (
    action_checklist,
    calculate_fallback_estimate,
    estimate_as_dict,
    estimate_chart_series,
    estimate_top_programs,
)
from program_catalog import (
    ProgramCategory,
    ProgramLevel,
    ProgramNotFoundError,
    ProgramStatus,
    get_program,
    list_programs,
)

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Québec Funding Calculator API", version="0.1.0")


def _error(status_code: int, error: str, details: Any = None, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details}, headers=headers)


@app.exception_handler(StarletteHTTPException)
def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        return _error(405, "Method not allowed", f"{request.method} is not supported on {request.url.path}", exc.headers)
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return _error(exc.status_code, exc.detail["error"], exc.detail.get("details"), exc.headers)
    return _error(exc.status_code, str(exc.detail), None, exc.headers)


@app.exception_handler(RequestValidationError)
def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    return _error(422, "Invalid request body", details)


@app.get("/health")
def health() -> dict:
    return {"ok": True, "environment": settings.environment}


@app.post("/api/report-pdf")
def report_pdf(req: ReportRequest) -> Response:
    try:
        pdf = build_report_pdf(req)
    except Exception as e:
        logger.exception("PDF generation failed")
        return _error(500, "Failed to generate PDF", str(e) or type(e).__name__)

    filename = report_filename(req.calc.company_name)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/v1/programs", response_model=List[ProgramResponse])
def programs(
    level: Optional[ProgramLevel] = Query(None, description="Provincial, Federal, Municipal or Private"),
    category: Optional[ProgramCategory] = Query(None, description="Grant, Loan or Tax Credit"),
    status: Optional[ProgramStatus] = Query(None, description="Open, Paused or Closed"),
    q: Optional[str] = Query(None, description="Text search on name, provider and tags"),
):
    return [p.to_dict() for p in list_programs(level=level, category=category, status=status, query=q)]


@app.get("/v1/programs/{slug}", response_model=ProgramResponse)
def program_detail(slug: str):
    try:
        program = get_program(slug)
    except ProgramNotFoundError as e:
        raise HTTPException(status_code=404, detail={"error": "Program not found", "details": str(e)})
    return program.to_dict()


@app.post("/v1/estimate", response_model=EstimateResponse)
def estimate(answers: Dict[str, Any] = Body(..., description="Calculator answers (camelCase keys)")):
    form = FormAnswers.from_dict(answers)
    result = calculate_fallback_estimate(form)
    return {
        "estimate": estimate_as_dict(result),
        "chart": estimate_chart_series(result),
        "top_programs": estimate_top_programs(result),
        "checklist": action_checklist(form),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.host, port=settings.port)
