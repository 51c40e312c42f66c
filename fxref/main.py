import threading

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.exceptions import RateError, UnknownCurrencyError
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, rates
from .services.rate_service import CurrencyConverter


def create_app(
    settings_override: Settings | None = None,
    converter: CurrencyConverter | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests.
    converter: pre-built converter to serve; otherwise one is built lazily from
    the settings on first request.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(UnknownCurrencyError, errors.unknown_currency_handler)
    app.add_exception_handler(RateError, errors.rates_unavailable_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)

    if converter is not None:
        app.dependency_overrides[rates.get_rate_converter] = lambda: converter
    elif settings_override is not None:
        # Settings differ from the process-wide ones; keep a converter per app
        _cache: dict = {}
        _lock = threading.Lock()

        def _app_converter() -> CurrencyConverter:
            with _lock:
                if "conv" not in _cache:
                    _cache["conv"] = CurrencyConverter(settings)
                return _cache["conv"]

        app.dependency_overrides[rates.get_rate_converter] = _app_converter

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app


app = create_app()
