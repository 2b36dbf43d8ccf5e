"""Request-scoped data contracts passed between the gate and its callers."""

from pydantic import BaseModel

from erpgate.access.roles import coerce_role
from erpgate.types import DomainType, EntityType, Outcome, Role, Tier


class OrgBindings(BaseModel):
    """Organization entities a principal is scoped to.

    Brand-tier callers carry at most one home brand, store-tier callers at
    most one home store. Company-tier callers are not restricted by bindings.
    """

    model_config = {"frozen": True}

    company_id: str | None = None
    brand_id: str | None = None
    store_id: str | None = None


class Principal(BaseModel):
    """Already-verified caller identity, as supplied by the identity edge."""

    model_config = {"frozen": True}

    user_id: str
    role: str  # raw claim; may be unrecognised
    bindings: OrgBindings = OrgBindings()
    email: str = ""

    @property
    def role_enum(self) -> Role | None:
        return coerce_role(self.role)


class AccessDecision(BaseModel):
    model_config = {"frozen": True}

    outcome: Outcome
    reason: str
    domain: DomainType
    canonical_path: str
    tier: Tier | None = None
    location: str | None = None  # redirect target
    entity_type: EntityType | None = None
    entity_id: str | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome == Outcome.ALLOW
