from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import structlog

from institute_pricing import __version__
from institute_pricing.config.settings import DOCUMENT_POLICIES, get_settings
from institute_pricing.errors import BackendError, PricingError, UnitNotFoundError, ValidationFailed
from institute_pricing.api.pricing_api import router as pricing_router
from institute_pricing.api.state import get_catalog
from institute_pricing.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level, settings.log_json)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Institute Pricing API",
    description="Derived totals and printable documents for quotations, proposals and invoices",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pricing_router)


@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    if isinstance(exc, ValidationFailed):
        return JSONResponse(status_code=400, content={"detail": exc.errors})
    if isinstance(exc, UnitNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})
    if isinstance(exc, BackendError):
        return JSONResponse(status_code=502, content={"detail": exc.message})
    logger.error("pricing_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"status": "online", "message": "Institute Pricing API Active"}


@app.get("/system/status")
async def get_status(catalog=Depends(get_catalog), current=Depends(get_settings)):
    return {
        "engine_active": True,
        "catalog_units": len(catalog),
        "max_discount_percent": current.max_discount_percent,
        "currency": current.currency,
        "discount_modes": {kind: p.discount_mode for kind, p in DOCUMENT_POLICIES.items()},
    }
