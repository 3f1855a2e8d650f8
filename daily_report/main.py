"""
Name: ASGI Entrypoint (daily_report.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers (uvicorn daily_report.main:app)

Notes/Constraints:
  - No configuration or IO should live here; keep it thin
"""

from daily_report.api.main import app

__all__ = ["app"]
