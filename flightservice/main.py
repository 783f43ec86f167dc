"""
Acme Air Flight Service - FastAPI Application
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, Request, HTTPException, Depends, Form, Header
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from flightservice.core.config import Settings, get_global_settings
from flightservice.core.error_handler import ErrorCode, error_handler
from flightservice.core.exceptions import DatabaseNotPopulated, FlightServiceError
from flightservice.models.requests import SignedRequest, build_trip_query, parse_one_way
from flightservice.models.responses import ErrorResponse, MilesResponse, TripOptionsResponse
from flightservice.services.date_normalizer import DateNormalizer
from flightservice.services.flight_options import FlightOptionsService, InMemoryFlightOptionsService
from flightservice.services.request_signing import (
    BODY_HASH_HEADER,
    CLIENT_ID_HEADER,
    DATE_HEADER,
    SIGNATURE_HEADER,
    RequestSignatureVerifier,
    SignaturePolicy,
    reward_miles_body,
)
from flightservice.services.trip_options import TripOptionsAssembler, find_trip_options

app_settings = Settings()
environment_config = app_settings.get_environment_config()
docs_enabled = environment_config['enable_docs']

# Configure logging
logging.basicConfig(level=environment_config['log_level'])
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(f"Starting {app_settings.API_TITLE} with configuration: {app_settings.mask_sensitive_data()}")
    try:
        yield
    finally:
        logger.info(f"Stopping {app_settings.API_TITLE}")


# Create FastAPI application instance; docs are served outside production only
app = FastAPI(
    title=app_settings.API_TITLE,
    version=app_settings.API_VERSION,
    description="Flight search and reward miles service for Acme Air",
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
    openapi_url="/openapi.json" if docs_enabled else None,
    lifespan=lifespan
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_flight_options_service: Optional[FlightOptionsService] = None


async def get_flight_options_service() -> FlightOptionsService:
    """Dependency to provide the flight options service."""
    global _flight_options_service
    if _flight_options_service is None:
        if app_settings.FLIGHT_DATA_FILE:
            _flight_options_service = InMemoryFlightOptionsService.from_json_file(app_settings.FLIGHT_DATA_FILE)
        else:
            _flight_options_service = InMemoryFlightOptionsService()
    return _flight_options_service


async def get_date_normalizer() -> DateNormalizer:
    """Dependency to provide a DateNormalizer using the system clock."""
    return DateNormalizer()


async def get_trip_options_assembler() -> TripOptionsAssembler:
    return TripOptionsAssembler()


async def get_signature_verifier() -> RequestSignatureVerifier:
    """Dependency to provide a RequestSignatureVerifier built from settings."""
    try:
        settings = get_global_settings()
    except ValueError as e:
        logger.error(f"Request signing configuration invalid: {e}")
        raise HTTPException(
            status_code=500,
            detail="Request signing is not configured"
        )

    signature_config = settings.get_signature_config()
    return RequestSignatureVerifier(
        policy=SignaturePolicy(enabled=signature_config['enabled']),
        digest=signature_config['digest'],
        max_skew=timedelta(seconds=signature_config['max_skew_seconds']),
        secret=settings.SIGNATURE_SECRET.encode("utf-8")
    )


@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    start_time = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.error(
            f"{request.method} {request.url.path} failed with {type(e).__name__} ({duration_ms:.1f}ms)"
        )
        raise

    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)")
    return response


# Global exception handlers
@app.exception_handler(FlightServiceError)
async def flight_service_exception_handler(request: Request, exc: FlightServiceError):
    """Handle application errors with their specific error codes."""
    return error_handler.handle_service_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with consistent error response format."""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail} - URL: {request.url}")

    code = f"HTTP_{exc.status_code}"
    if code in ErrorCode.__members__:
        return error_handler.create_json_response(ErrorCode[code], str(exc.detail))

    error_response = ErrorResponse(
        error=code,
        message=str(exc.detail),
        timestamp=datetime.now(timezone.utc)
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode='json')
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with consistent error response format."""
    logger.error(f"Validation Error: {exc.errors()} - URL: {request.url}")

    return error_handler.create_json_response(
        ErrorCode.VALIDATION_ERROR,
        f"Request validation failed: {exc.errors()}"
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions with consistent error response format."""
    logger.error(f"Unhandled Exception: {type(exc).__name__}: {str(exc)} - URL: {request.url}", exc_info=True)

    return error_handler.create_json_response(ErrorCode.INTERNAL_SERVER_ERROR)


@app.get("/", response_class=PlainTextResponse)
async def status():
    """Liveness check"""
    return "OK"


@app.post("/queryflights", response_model=TripOptionsResponse)
async def query_flights(
    from_airport: str = Form(..., alias="fromAirport"),
    to_airport: str = Form(..., alias="toAirport"),
    from_date: str = Form(..., alias="fromDate"),
    return_date: Optional[str] = Form(None, alias="returnDate"),
    one_way_flag: Optional[str] = Form(None, alias="oneWay"),
    service: FlightOptionsService = Depends(get_flight_options_service),
    normalizer: DateNormalizer = Depends(get_date_normalizer),
    assembler: TripOptionsAssembler = Depends(get_trip_options_assembler)
):
    """
    Find the flight options for a one-way or round trip.

    Dates the normalizer cannot parse are treated as having no flights.

    Raises:
        DatabaseNotPopulated: If the flight data source has not been populated
    """
    one_way = parse_one_way(one_way_flag)
    if not await service.is_populated():
        raise DatabaseNotPopulated("Flight DB has not been populated")

    query = build_trip_query(
        from_airport=from_airport,
        to_airport=to_airport,
        from_date=normalizer.parse_lenient(from_date),
        return_date=None if one_way else normalizer.parse_lenient(return_date),
        one_way=one_way
    )
    logger.info(f"Querying {query.trip_type} flights {from_airport} -> {to_airport}")

    return await find_trip_options(service, query, assembler)


@app.post("/getrewardmiles", response_model=MilesResponse)
async def get_reward_miles(
    request: Request,
    flight_segment: str = Form(..., alias="flightSegment"),
    client_id: Optional[str] = Header(None, alias=CLIENT_ID_HEADER),
    timestamp: Optional[str] = Header(None, alias=DATE_HEADER),
    body_hash: Optional[str] = Header(None, alias=BODY_HASH_HEADER),
    signature: Optional[str] = Header(None, alias=SIGNATURE_HEADER),
    service: FlightOptionsService = Depends(get_flight_options_service),
    verifier: RequestSignatureVerifier = Depends(get_signature_verifier)
):
    """
    Get the reward miles for a flight segment.

    The request must carry valid acmeair-* signature headers unless secure
    service calls are disabled.
    """
    verifier.verify(SignedRequest(
        method=request.method,
        path=request.url.path,
        timestamp=timestamp,
        body_hash=body_hash,
        signature=signature,
        client_id=client_id,
        raw_body=reward_miles_body(flight_segment)
    ))

    miles = await service.reward_miles(flight_segment)
    return MilesResponse(miles=miles)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app_settings.API_HOST, port=app_settings.API_PORT)
