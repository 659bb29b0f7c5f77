"""HTTP routers."""

from vmtb.api.routers.intake import router as intake_router
from vmtb.api.routers.meetings import router as meetings_router

__all__ = ["intake_router", "meetings_router"]
