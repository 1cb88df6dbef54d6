"""
Pricing API - FastAPI router for catalog lookup and document calculation.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from ..catalog.course_catalog import CourseCatalog
from ..config.settings import Settings, get_settings
from ..documents.render import render_document_pdf
from ..engine.calculator import PricingCalculator
from ..schemas.calculation import CalculationRequest, CalculationResponse, CatalogUnitOut
from .state import get_catalog

router = APIRouter(prefix="/api", tags=["pricing"])


def replay(request: CalculationRequest, catalog: CourseCatalog, settings: Settings) -> PricingCalculator:
    """Apply the request's edits to an empty document, in form order."""
    calculator = PricingCalculator.new(request.kind, catalog, settings)
    for item in request.items:
        calculator.add_item(item.unit_id, item.quantity)
    calculator.set_discount(request.discount)
    return calculator


@router.get("/catalog", response_model=list[CatalogUnitOut])
async def list_catalog(search: Optional[str] = None, catalog: CourseCatalog = Depends(get_catalog)):
    """Active catalog units, optionally filtered by name/description."""
    return [CatalogUnitOut(**unit.__dict__) for unit in catalog.search(search)]


@router.get("/catalog/{unit_id}", response_model=CatalogUnitOut)
async def get_catalog_unit(unit_id: int, catalog: CourseCatalog = Depends(get_catalog)):
    return CatalogUnitOut(**catalog.resolve(unit_id).__dict__)


@router.post("/pricing/calculate", response_model=CalculationResponse)
async def calculate(
    request: CalculationRequest,
    catalog: CourseCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """Recompute derived totals for a document draft."""
    calculator = replay(request, catalog, settings)
    return CalculationResponse(**calculator.document.to_dict(), currency=settings.currency)


@router.post("/pricing/pdf")
async def render_pdf(
    request: CalculationRequest,
    catalog: CourseCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """Render a document draft as PDF."""
    calculator = replay(request, catalog, settings)
    if not calculator.document.items:
        raise HTTPException(status_code=400, detail="At least one course item is required")

    pdf = render_document_pdf(calculator.document, request.details, settings)
    filename = f"{request.kind.capitalize()}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
