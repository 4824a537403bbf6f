# pdfform/main.py

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pdfform.core.config import settings
from pdfform.core.middleware import (
    FixedWindowRateLimiter, RateLimitMiddleware, SecurityHeadersMiddleware
)
from pdfform.core.security import verify_api_key
from pdfform.templates.exceptions import TemplateBaseException, convert_to_http_exception
from pdfform.utils.logger import setup_app_logging, get_logger
# Local application imports - Routes
from pdfform.templates.router import router as template_routes
from pdfform.forms.router import router as form_routes


# Create the FastAPI app
pdf_app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Store PDF form templates, inspect their fields and render filled, flattened PDFs.",
    docs_url="/api-docs",
    redoc_url=None,
)

logger = get_logger(__name__)

rate_limiter = FixedWindowRateLimiter(
    max_requests=settings.rate_limit_max_requests,
    window_seconds=settings.rate_limit_window_seconds,
)

pdf_app.add_middleware(
    RateLimitMiddleware,
    limiter=rate_limiter,
    enabled=lambda: settings.rate_limit_enabled,
)
# Wraps the rate limiter, 429 responses carry the security headers too
pdf_app.add_middleware(SecurityHeadersMiddleware)
pdf_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure logging, outermost so rejected requests are logged too
setup_app_logging(
    pdf_app,
    log_level=settings.log_level,
    use_json=settings.log_json or settings.environment.lower() == "production",
    log_file=settings.log_file,
    app_name=settings.app_name,
    environment=settings.environment,
)

# Include routers
api_dependencies = [Depends(verify_api_key)]
pdf_app.include_router(template_routes, prefix=settings.api_prefix, dependencies=api_dependencies)
pdf_app.include_router(form_routes, prefix=settings.api_prefix, dependencies=api_dependencies)


@pdf_app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    """
    Unmatched routes get a plain-text 404, every other HTTP error keeps the JSON body
    """
    if exc.status_code == 404 and exc.detail == "Not Found":
        return PlainTextResponse("Error: Not Found", status_code=404)
    return await http_exception_handler(request, exc)


@pdf_app.exception_handler(TemplateBaseException)
async def template_store_error_handler(request: Request, exc: TemplateBaseException):
    """
    Store errors raised outside a route's own handling, e.g. while resolving the
    configured storage backend
    """
    logger.error("Template store unavailable", path=request.url.path, error_message=exc.message, error_details=exc.details)
    return await http_exception_handler(request, convert_to_http_exception(exc))


# Root API to check if the server is up
@pdf_app.get("/", tags=["Base"])
async def health_check():
    """
    Root API to check if the server is up
    """
    logger.info("Calling root API for health check")
    return {"status": "ok"}
