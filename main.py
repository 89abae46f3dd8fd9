from contextlib import asynccontextmanager
from datetime import datetime
from functools import lru_cache

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from loguru import logger

from analysis import AnalysisClient
from config import Settings, load_settings
from errors import DreamServiceError, InvalidInput
from knowledge import DEFAULT_SCHOOL, DREAM_SYMBOLS, SCHOOL_PROFILES
from logger_config import setup_logging
from models import DreamRequest, DreamResponse, ErrorResponse, ReportRequest
from prompts import compose_prompt
from report import REPORT_FILENAME, ReportComposer
from symbols import match_symbols

VERSION = "1.1.0"

REPORT_PATH = "/api/generate-report"
REPORT_INPUT_MESSAGE = "请提供完整的梦境描述、解读流派和解析内容"


# ----------------------------
# Components (created once, shared read-only)
# ----------------------------
@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_analysis_client() -> AnalysisClient:
    return AnalysisClient.from_settings(get_settings())


@lru_cache
def get_report_composer() -> ReportComposer:
    return ReportComposer()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Initializing dream analysis components...")
    get_analysis_client()
    get_report_composer()
    logger.info(
        f"Components ready: provider={settings.llm_provider} model={settings.llm_model} "
        f"symbols={len(DREAM_SYMBOLS)} schools={len(SCHOOL_PROFILES)}"
    )
    yield
    logger.info("Shutting down")
    await logger.complete()


# ----------------------------
# FastAPI
# ----------------------------
app = FastAPI(title="Dream Analysis AI API", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------
# Error handling
# ----------------------------
def error_response(exc: DreamServiceError) -> JSONResponse:
    body = ErrorResponse(
        error=exc.message,
        details=exc.detail if get_settings().debug else None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(DreamServiceError)
async def dream_service_error_handler(request: Request, exc: DreamServiceError):
    if isinstance(exc, InvalidInput):
        logger.info(f"Rejected {request.url.path}: {exc}")
    else:
        logger.opt(exception=exc).error(f"{type(exc).__name__} on {request.url.path}: {exc}")
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Malformed body on {request.url.path}: {exc.errors()}")
    message = REPORT_INPUT_MESSAGE if request.url.path == REPORT_PATH else None
    return error_response(InvalidInput(str(exc.errors()), message=message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}")
    return error_response(DreamServiceError(repr(exc)))


# ----------------------------
# Validation
# ----------------------------
def validate_dream_request(request: DreamRequest, settings: Settings) -> None:
    if not request.dream.strip() or not request.school.strip():
        raise InvalidInput("dream and school are required")

    limit = settings.max_narrative_chars
    if limit and len(request.dream) > limit:
        raise InvalidInput(
            f"dream is {len(request.dream)} characters, limit is {limit}",
            message=f"梦境描述过长，请控制在{limit}字以内",
        )


def validate_report_request(request: ReportRequest) -> None:
    if not request.dream.strip() or not request.school.strip() or not request.analysis.strip():
        raise InvalidInput("dream, school and analysis are required", message=REPORT_INPUT_MESSAGE)


# ----------------------------
# API
# ----------------------------
@app.get("/")
def root():
    return {
        "status": "online",
        "message": "Dream Analysis AI API",
        "version": VERSION,
        "endpoints": {
            "analyze": "/api/analyze-dream",
            "report": REPORT_PATH,
            "schools": "/api/schools",
            "health": "/health",
        },
    }


@app.get("/health")
def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "provider": settings.llm_provider,
        "model": settings.llm_model,
        "ai_status": "configured" if settings.llm_api_key else "missing_api_key",
        "symbols": len(DREAM_SYMBOLS),
        "schools": list(SCHOOL_PROFILES),
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/api/schools")
def list_schools():
    return {
        "default": DEFAULT_SCHOOL,
        "schools": [
            {
                "id": profile.id,
                "label": profile.id,
                "desc": profile.summary,
                "emphasis": [title for title, _ in profile.emphasis],
            }
            for profile in SCHOOL_PROFILES.values()
        ],
    }


@app.post("/api/analyze-dream", response_model=DreamResponse)
async def analyze_dream(
    request: DreamRequest,
    client: AnalysisClient = Depends(get_analysis_client),
    settings: Settings = Depends(get_settings),
):
    validate_dream_request(request, settings)

    prompt = compose_prompt(request.school, request.dream)
    analysis_text = await client.analyze(prompt.system_instruction, prompt.user_message)
    symbols = match_symbols(request.dream)

    logger.info(f"Dream analyzed: school={request.school} symbols={[s.symbol for s in symbols]}")
    return DreamResponse(
        dream=request.dream,
        school=request.school,
        analysis=analysis_text,
        symbols=symbols,
    )


@app.post(REPORT_PATH)
def generate_report(
    request: ReportRequest,
    composer: ReportComposer = Depends(get_report_composer),
):
    validate_report_request(request)

    pdf_bytes = composer.compose(request)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
    )
