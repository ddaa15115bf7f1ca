"""
Supabase Estimate Store for Studio Estimator

Handles tenant lookup, pricing configuration loading, and estimate records
via Supabase. Every record is keyed by tenant.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List
from supabase import create_client, Client

from api.config import SUPABASE_URL, SUPABASE_SERVICE_KEY
from calculator import PricingConfiguration

logger = logging.getLogger(__name__)

ESTIMATE_STATUSES = ("pending", "approved", "rejected", "generated")


@dataclass
class DashboardStats:
    """Headline numbers for a studio's dashboard."""
    revenue_this_month: float = 0.0
    revenue_last_month: float = 0.0
    revenue_growth: float = 0.0  # percent vs last month
    estimates_this_month: int = 0
    conversion_rate: float = 0.0  # percent of estimates approved
    active_projects: int = 0
    pending_approvals: int = 0
    rejected_this_week: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_created_at(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        created = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if created.tzinfo is not None:
        created = created.astimezone().replace(tzinfo=None)
    return created


def _amount(row: Dict[str, Any]) -> float:
    try:
        return float(row.get("total_amount") or 0)
    except (TypeError, ValueError):
        return 0.0


def summarize_estimates(rows: List[Dict[str, Any]], now: Optional[datetime] = None) -> DashboardStats:
    """
    Aggregate estimate rows into dashboard stats.

    Revenue and active projects count approved estimates. Months are calendar
    months of ``created_at``; "this week" is the last 7 days.
    """
    now = now or datetime.now()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_month_start = (month_start - timedelta(days=1)).replace(day=1)
    week_start = now - timedelta(days=7)

    stats = DashboardStats()
    approved = 0
    for row in rows:
        status = row.get("status")
        created = _parse_created_at(row.get("created_at"))
        this_month = created is not None and month_start <= created <= now
        last_month = created is not None and last_month_start <= created < month_start

        if this_month:
            stats.estimates_this_month += 1
        if status == "approved":
            approved += 1
            if this_month:
                stats.revenue_this_month += _amount(row)
            elif last_month:
                stats.revenue_last_month += _amount(row)
        elif status == "pending":
            stats.pending_approvals += 1
        elif status == "rejected" and created is not None and created >= week_start:
            stats.rejected_this_week += 1

    stats.active_projects = approved
    if rows:
        stats.conversion_rate = round(approved / len(rows) * 100, 1)
    if stats.revenue_last_month:
        stats.revenue_growth = round(
            (stats.revenue_this_month - stats.revenue_last_month) / stats.revenue_last_month * 100, 1
        )
    elif stats.revenue_this_month:
        stats.revenue_growth = 100.0
    return stats

# Initialize Supabase client (will be None if no service key)
supabase: Optional[Client] = None

def get_supabase_client() -> Optional[Client]:
    """Get or create Supabase client."""
    global supabase
    if supabase is None and SUPABASE_URL and SUPABASE_SERVICE_KEY:
        supabase = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
    return supabase


class SupabaseEstimateStore:
    """Estimate store backed by Supabase database."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase_client()
        if not self.client:
            logger.warning("Supabase client not initialized. Check SUPABASE_URL and SUPABASE_SERVICE_KEY.")

    # =========================================================================
    # Tenants
    # =========================================================================

    def get_tenant_by_store_id(self, store_id: str) -> Optional[Dict[str, Any]]:
        """Resolve a storefront slug to a tenant, trying the lower-cased slug first."""
        if not self.client or not store_id:
            return None
        for candidate in dict.fromkeys([store_id.lower(), store_id]):
            try:
                result = self.client.table("tenants").select("*").eq("store_id", candidate).limit(1).execute()
            except Exception as e:
                logger.error(f"Error resolving tenant {candidate}: {e}")
                return None
            if result.data:
                return result.data[0]
        return None

    # =========================================================================
    # Pricing Configuration
    # =========================================================================

    def get_pricing_config(self, tenant_id: str) -> Optional[PricingConfiguration]:
        """Load a tenant's pricing configuration, or None if none is stored."""
        if not self.client:
            return None
        try:
            result = self.client.table("pricing_configs").select("*").eq("tenant_id", tenant_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error loading pricing config for tenant {tenant_id}: {e}")
            return None
        if not result.data:
            return None
        row = result.data[0]
        try:
            return PricingConfiguration.from_dict(row.get("config") or row)
        except Exception as e:
            logger.error(f"Invalid pricing config for tenant {tenant_id}: {e}")
            return None

    # =========================================================================
    # Estimates
    # =========================================================================

    def create_estimate(self, tenant_id: str, record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Insert an estimate record for a tenant."""
        if not self.client:
            return None
        try:
            data = {
                **record,
                "tenant_id": tenant_id,
                "status": record.get("status", "pending"),
                "created_at": datetime.now().isoformat(),
            }
            result = self.client.table("estimates").insert(data).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error creating estimate for tenant {tenant_id}: {e}")
            return None

    def get_estimate(self, tenant_id: str, estimate_id: str) -> Optional[Dict[str, Any]]:
        """Get one estimate, scoped to its tenant."""
        if not self.client:
            return None
        try:
            result = (
                self.client.table("estimates").select("*")
                .eq("tenant_id", tenant_id).eq("id", estimate_id)
                .limit(1).execute()
            )
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error getting estimate {estimate_id}: {e}")
            return None

    def list_recent_estimates(self, tenant_id: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Most recent estimates for a tenant dashboard."""
        if not self.client:
            return []
        try:
            result = (
                self.client.table("estimates").select("*")
                .eq("tenant_id", tenant_id)
                .order("created_at", desc=True)
                .limit(limit).execute()
            )
            return result.data or []
        except Exception as e:
            logger.error(f"Error listing estimates for tenant {tenant_id}: {e}")
            return []

    def update_estimate_status(self, tenant_id: str, estimate_id: str, status: str) -> Optional[Dict[str, Any]]:
        """Approve, reject or otherwise move an estimate through its lifecycle."""
        if status not in ESTIMATE_STATUSES:
            raise ValueError(f"Invalid status: {status}. Must be one of {list(ESTIMATE_STATUSES)}")
        if not self.client:
            return None
        try:
            result = (
                self.client.table("estimates").update({"status": status})
                .eq("tenant_id", tenant_id).eq("id", estimate_id)
                .execute()
            )
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error updating estimate {estimate_id} status: {e}")
            return None

    def get_dashboard_stats(self, tenant_id: str, now: Optional[datetime] = None) -> Optional[DashboardStats]:
        """Revenue, lead and approval counts for the tenant dashboard."""
        if not self.client:
            return None
        try:
            result = (
                self.client.table("estimates").select("id,status,total_amount,created_at")
                .eq("tenant_id", tenant_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error loading dashboard stats for tenant {tenant_id}: {e}")
            return None
        return summarize_estimates(result.data or [], now)


# Global store instance
supabase_store = SupabaseEstimateStore()
