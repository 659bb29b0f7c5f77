"""HTTP API of the VMTB core."""

from vmtb.api.main import app, create_app

__all__ = ["app", "create_app"]
