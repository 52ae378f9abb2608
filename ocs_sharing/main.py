"""
Name: ASGI Entrypoint (ocs_sharing.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing ocs_sharing.api.main

Notes/Constraints:
  - uvicorn ocs_sharing.main:app
  - Changing this path is a deployment-breaking change for infra scripts
"""

from ocs_sharing.api.main import app

__all__ = ["app"]
