# oauth_store/domain/models/client_domain_model.py

from enum import Enum


class ReconciliationOutcome(str, Enum):
    """Result of provisioning one configured client."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"
