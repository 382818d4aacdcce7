from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
import time
import structlog
import uvicorn

from speaknotes.config import Settings
from speaknotes.errors import NotesAPIError, notes_api_error_handler
from speaknotes.middleware.rate_limit import build_limiter, rate_limit_exceeded_handler
from speaknotes.routers import notes as notes_router
from speaknotes.services.logging import configure_logging, log_api_request
from speaknotes.services.monitoring import HealthChecker, get_metrics, REQUEST_COUNT, REQUEST_DURATION

logger = structlog.get_logger()

LIVENESS_MESSAGE = "✅ SpeakNotes AI – Lecture Notes API is running"


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Turns raw lecture transcripts into structured study notes",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.health_checker = HealthChecker()

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add rate limiting
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_exception_handler(NotesAPIError, notes_api_error_handler)

    # Add middleware for request logging and metrics
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        start_time = time.time()
        log_api_request(request)

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(process_time)

        log_api_request(request, response, response_time=process_time)
        return response

    # ----------------- Liveness, Health & Monitoring -----------------
    @app.get("/", response_class=PlainTextResponse)
    def index():
        return LIVENESS_MESSAGE

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        return request.app.state.health_checker.get_health_status()

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return get_metrics()

    # ----------------- Routers -----------------
    app.include_router(notes_router.router)

    logger.info("app_created", auth_enabled=settings.auth_enabled, rate_limit_enabled=settings.rate_limit_enabled)
    return app


def run():
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = create_app()


if __name__ == "__main__":
    run()
