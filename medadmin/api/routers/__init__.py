"""API routers for MedAdmin."""

from . import providers
from . import organizations
from . import requirements
from . import overrides

__all__ = [
    "providers",
    "organizations",
    "requirements",
    "overrides",
]
