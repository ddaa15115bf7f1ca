"""
Pending Estimate Drafts for Studio Estimator

A guest who submits an estimate is sent off to log in first. Their selections
are parked here under a resume token and replayed once they come back.
Drafts expire after DRAFT_TTL_MINUTES.
"""

import os
import json
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

from api.config import DRAFT_DATA_FILE, DRAFT_TTL_MINUTES

logger = logging.getLogger(__name__)


@dataclass
class PendingDraft:
    """A submission waiting for the customer to authenticate."""
    token: str
    tenant_id: str
    tenant_slug: str
    customer_info: Dict[str, Any]
    estimate: Dict[str, Any]  # EstimateInput.to_dict()
    auto_submit: bool = True
    created_at: str = ""
    expires_at: str = ""

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        return datetime.fromisoformat(self.expires_at) <= now


class DraftStore:
    """In-memory draft store with JSON file persistence."""

    def __init__(self, data_file: Optional[str] = DRAFT_DATA_FILE, ttl_minutes: int = DRAFT_TTL_MINUTES):
        self.data_file = data_file
        self.ttl = timedelta(minutes=ttl_minutes)
        self.drafts: Dict[str, PendingDraft] = {}
        self._load_from_file()

    def _load_from_file(self):
        """Load drafts from JSON file if it exists."""
        if not self.data_file or not os.path.exists(self.data_file):
            return
        try:
            with open(self.data_file, 'r') as f:
                data = json.load(f)
            for token, draft_data in data.items():
                self.drafts[token] = PendingDraft(**draft_data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not load draft data: {e}")

    def _save_to_file(self):
        """Save drafts to JSON file."""
        if not self.data_file:
            return
        try:
            data = {token: asdict(draft) for token, draft in self.drafts.items()}
            with open(self.data_file, 'w') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save draft data: {e}")

    def save(
        self,
        tenant_id: str,
        tenant_slug: str,
        customer_info: Dict[str, Any],
        estimate: Dict[str, Any],
        auto_submit: bool = True,
        now: Optional[datetime] = None
    ) -> PendingDraft:
        """Park a submission and return the draft with its resume token."""
        now = now or datetime.now()
        draft = PendingDraft(
            token=secrets.token_urlsafe(16),
            tenant_id=tenant_id,
            tenant_slug=tenant_slug,
            customer_info=dict(customer_info),
            estimate=estimate,
            auto_submit=auto_submit,
            created_at=now.isoformat(),
            expires_at=(now + self.ttl).isoformat(),
        )
        self.drafts[draft.token] = draft
        self._save_to_file()
        logger.info(f"Saved pending draft for tenant {tenant_id}")
        return draft

    def get(self, token: str, now: Optional[datetime] = None) -> Optional[PendingDraft]:
        """Get a live draft; expired drafts are removed and reported as missing."""
        draft = self.drafts.get(token)
        if draft is None:
            return None
        if draft.is_expired(now):
            self.delete(token)
            return None
        return draft

    def consume(self, token: str, now: Optional[datetime] = None) -> Optional[PendingDraft]:
        """Get a draft and remove it so it can only be replayed once."""
        draft = self.get(token, now)
        if draft is not None:
            self.delete(token)
        return draft

    def delete(self, token: str) -> bool:
        if token not in self.drafts:
            return False
        del self.drafts[token]
        self._save_to_file()
        return True

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Drop every expired draft; returns how many were removed."""
        expired = [t for t, d in self.drafts.items() if d.is_expired(now)]
        for token in expired:
            del self.drafts[token]
        if expired:
            self._save_to_file()
        return len(expired)


# Global store instance
draft_store = DraftStore()
