"""
Studio Estimator - FastAPI Backend API

This API serves the storefront price estimator (live preview and submission),
pending-draft resume, and the tenant dashboard's estimate views.
"""

import os
import sys
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from enum import Enum

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculator import (
    EstimateInput,
    EstimateResult,
    RoomInstance,
    Segment,
    Tier,
    compute,
    compare_tiers,
)
from api.config import CORS_ORIGINS, LOG_LEVEL
from api.draft_store import draft_store
from api.quote_formatter import QuoteFormatter
from api.supabase_store import supabase_store

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("studio_estimator")

APP_VERSION = "1.0.0"

# Initialize FastAPI app
app = FastAPI(
    title="Studio Estimator API",
    description="Multi-tenant interior design price estimator",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

quote_formatter = QuoteFormatter()


# ============================================================================
# Pydantic Models
# ============================================================================

class TierEnum(str, Enum):
    basic = "basic"
    standard = "standard"
    luxe = "luxe"


class SegmentEnum(str, Enum):
    residential = "residential"
    commercial = "commercial"


class StatusEnum(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    generated = "generated"


class RoomInput(BaseModel):
    items: Dict[str, float] = {}


class KitchenInput(BaseModel):
    layout: Optional[str] = None
    material: Optional[str] = None
    items: Dict[str, float] = {}


class EstimateRequest(BaseModel):
    plan: TierEnum = TierEnum.standard
    segment: SegmentEnum = SegmentEnum.residential
    carpet_area: float = Field(0, ge=0)
    living_area: Dict[str, float] = {}
    kitchen: KitchenInput = KitchenInput()
    bedrooms: List[RoomInput] = []
    bathrooms: List[RoomInput] = []
    cabins: List[RoomInput] = []

    def to_estimate_input(self) -> EstimateInput:
        return EstimateInput(
            tier=Tier(self.plan.value),
            segment=Segment(self.segment.value),
            total_area=self.carpet_area,
            general_items=dict(self.living_area),
            kitchen_items=dict(self.kitchen.items),
            kitchen_layout=self.kitchen.layout,
            kitchen_material=self.kitchen.material,
            bedrooms=[RoomInstance(items=dict(r.items)) for r in self.bedrooms],
            bathrooms=[RoomInstance(items=dict(r.items)) for r in self.bathrooms],
            cabins=[RoomInstance(items=dict(r.items)) for r in self.cabins],
        )


class CustomerInfo(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""
    city: str = ""


class SubmitEstimateRequest(EstimateRequest):
    customer: CustomerInfo
    customer_id: Optional[str] = None  # None for guests; triggers a pending draft


class ResumeDraftRequest(BaseModel):
    customer_id: str


class StatusUpdateRequest(BaseModel):
    status: StatusEnum


class BreakdownLineResponse(BaseModel):
    category: str
    item: str
    item_id: str
    quantity: float
    unit_price: float
    total: float


class EstimateResponse(BaseModel):
    plan: str
    total: float
    breakdown: List[BreakdownLineResponse]
    group_totals: Dict[str, float]
    tier_comparison: Dict[str, float]
    formatted_total: str


class SubmissionResponse(BaseModel):
    status: str  # "saved" or "pending_auth"
    estimate_id: Optional[str] = None
    total: Optional[float] = None
    breakdown: List[BreakdownLineResponse] = []
    draft_token: Optional[str] = None
    draft_expires_at: Optional[str] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


# ============================================================================
# Helpers
# ============================================================================

def _breakdown_response(result: EstimateResult) -> List[BreakdownLineResponse]:
    return [
        BreakdownLineResponse(
            category=line.category,
            item=line.item,
            item_id=line.item_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total=line.total
        )
        for line in result.breakdown
    ]


def _resolve_tenant(slug: str) -> Dict[str, Any]:
    tenant = supabase_store.get_tenant_by_store_id(slug)
    if not tenant:
        raise HTTPException(status_code=404, detail=f"No studio found for '{slug}'")
    return tenant


def _validate_submission(customer: Dict[str, Any], estimate_input: EstimateInput):
    """Same checks the storefront's final step enforces."""
    if not all(customer.get(k) for k in ("name", "phone", "email", "city")):
        raise HTTPException(status_code=400, detail="Please fill in all customer information fields")
    if len(customer["phone"]) < 10:
        raise HTTPException(status_code=400, detail="Phone number must have at least 10 digits")
    if "@" not in customer["email"]:
        raise HTTPException(status_code=400, detail="Invalid email address")
    if estimate_input.total_area <= 0:
        raise HTTPException(status_code=400, detail="Please enter a valid carpet area")


def _submit_estimate(
    tenant_id: str,
    customer: Dict[str, Any],
    estimate_input: EstimateInput,
    customer_id: str
) -> SubmissionResponse:
    """Run the final pricing pass and persist the estimate."""
    config = supabase_store.get_pricing_config(tenant_id)
    result = compute(config, estimate_input.tier, estimate_input)

    record = {
        "customer_info": customer,
        # Flattened for the dashboard order list
        "client_name": customer.get("name"),
        "client_phone": customer.get("phone"),
        "client_email": customer.get("email"),
        **estimate_input.to_dict(),
        "total_amount": result.total,
        "breakdown": result.to_dict()["breakdown"],
        "status": "pending",
        "customer_id": customer_id,
    }
    saved = supabase_store.create_estimate(tenant_id, record)
    if not saved:
        raise HTTPException(status_code=502, detail="Could not save estimate. Please try again.")

    logger.info(f"Estimate {saved.get('id')} saved for tenant {tenant_id}: {result.total}")
    return SubmissionResponse(
        status="saved",
        estimate_id=str(saved.get("id")) if saved.get("id") is not None else None,
        total=result.total,
        breakdown=_breakdown_response(result),
        message="Your estimate has been saved successfully."
    )


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/", response_model=HealthResponse)
async def root():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=APP_VERSION
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=APP_VERSION
    )


@app.get("/api/v1/tenants/{slug}/pricing")
def get_pricing(slug: str, segment: SegmentEnum = Query(SegmentEnum.residential)):
    """
    Pricing catalog for the storefront estimator.

    Returns: Categories offered for the segment and the default kitchen options
    """
    tenant = _resolve_tenant(slug)
    config = supabase_store.get_pricing_config(tenant["id"])
    if config is None:
        return {"tenant_id": tenant["id"], "loaded": False, "categories": []}

    return {
        "tenant_id": tenant["id"],
        "loaded": True,
        "categories": [c.to_dict() for c in config.categories_for_segment(Segment(segment.value))],
        "kitchen_layouts": [o.to_dict() for o in config.kitchen_layouts if o.enabled],
        "kitchen_materials": [o.to_dict() for o in config.kitchen_materials if o.enabled],
        "default_kitchen_layout": config.default_kitchen_layout(),
        "default_kitchen_material": config.default_kitchen_material(),
    }


@app.post("/api/v1/tenants/{slug}/estimate/preview", response_model=EstimateResponse)
def preview_estimate(slug: str, request: EstimateRequest):
    """
    Live running total for the estimator form.

    An unconfigured studio prices everything at zero rather than failing.
    """
    tenant = _resolve_tenant(slug)
    config = supabase_store.get_pricing_config(tenant["id"])
    estimate_input = request.to_estimate_input()

    result = compute(config, estimate_input.tier, estimate_input)
    group_totals = {
        label: sum(line.total for line in lines)
        for label, lines in result.grouped().items()
    }

    return EstimateResponse(
        plan=estimate_input.tier.value,
        total=result.total,
        breakdown=_breakdown_response(result),
        group_totals=group_totals,
        tier_comparison=compare_tiers(config, estimate_input),
        formatted_total=quote_formatter.format_amount(result.total)
    )


@app.post("/api/v1/tenants/{slug}/estimates", response_model=SubmissionResponse)
def submit_estimate(slug: str, request: SubmitEstimateRequest, response: Response):
    """
    Submit an estimate.

    Guests (no customer_id) get a pending draft and a resume token instead;
    the estimate is saved when they resume after logging in.
    """
    tenant = _resolve_tenant(slug)
    estimate_input = request.to_estimate_input()
    customer = request.customer.model_dump()
    _validate_submission(customer, estimate_input)

    if not request.customer_id:
        draft = draft_store.save(
            tenant_id=tenant["id"],
            tenant_slug=slug,
            customer_info=customer,
            estimate=estimate_input.to_dict()
        )
        response.status_code = 202
        return SubmissionResponse(
            status="pending_auth",
            draft_token=draft.token,
            draft_expires_at=draft.expires_at,
            message="Please login to save and view your estimate breakdown."
        )

    try:
        return _submit_estimate(tenant["id"], customer, estimate_input, request.customer_id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting estimate: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/v1/drafts/{token}/resume", response_model=SubmissionResponse)
def resume_draft(token: str, request: ResumeDraftRequest):
    """
    Replay a parked submission once the customer has authenticated.

    The draft is removed only after the estimate is saved.
    """
    draft = draft_store.get(token)
    if draft is None:
        raise HTTPException(status_code=404, detail="Draft not found or expired")

    estimate_input = EstimateInput.from_dict(draft.estimate)
    response = _submit_estimate(draft.tenant_id, draft.customer_info, estimate_input, request.customer_id)
    draft_store.delete(token)
    return response


@app.get("/api/v1/tenants/{tenant_id}/estimates")
def list_estimates(tenant_id: str, limit: int = Query(10, ge=1, le=100)):
    """Recent estimates for the studio dashboard."""
    estimates = supabase_store.list_recent_estimates(tenant_id, limit)
    for estimate in estimates:
        estimate["formatted_amount"] = quote_formatter.format_amount(estimate.get("total_amount"), compact=True)
    return {"estimates": estimates}


@app.get("/api/v1/tenants/{tenant_id}/dashboard")
def get_dashboard(tenant_id: str):
    """
    Dashboard overview: monthly revenue and growth, leads this month,
    conversion, active projects and items needing attention.
    """
    stats = supabase_store.get_dashboard_stats(tenant_id)
    if stats is None:
        raise HTTPException(status_code=502, detail="Could not load dashboard stats")

    return {
        "tenant_id": tenant_id,
        **stats.to_dict(),
        "formatted_revenue": quote_formatter.format_amount(stats.revenue_this_month, compact=True),
        "needs_attention": stats.pending_approvals > 0 or stats.rejected_this_week > 0,
    }


@app.get("/api/v1/tenants/{tenant_id}/estimates/{estimate_id}/quote")
def get_quote(tenant_id: str, estimate_id: str):
    """
    Customer-facing quote for a saved estimate.

    Adds the display-only tax line; the stored total is not changed.
    """
    estimate = supabase_store.get_estimate(tenant_id, estimate_id)
    if not estimate:
        raise HTTPException(status_code=404, detail="Estimate not found")

    summary = quote_formatter.build_summary(
        estimate.get("total_amount", 0),
        estimate.get("breakdown") or []
    )
    return {
        "estimate_id": estimate_id,
        "plan": estimate.get("plan"),
        "status": estimate.get("status"),
        "customer_info": estimate.get("customer_info"),
        **summary.to_dict(),
        "formatted": {
            "subtotal": quote_formatter.format_amount(summary.subtotal),
            "tax_amount": quote_formatter.format_amount(summary.tax_amount),
            "grand_total": quote_formatter.format_amount(summary.grand_total),
        },
    }


@app.patch("/api/v1/tenants/{tenant_id}/estimates/{estimate_id}/status")
def update_estimate_status(tenant_id: str, estimate_id: str, request: StatusUpdateRequest):
    """Approve or reject an estimate from the dashboard."""
    updated = supabase_store.update_estimate_status(tenant_id, estimate_id, request.status.value)
    if not updated:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return updated


# ============================================================================
# Run server
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
