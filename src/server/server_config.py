"""Configuration for the server."""

from __future__ import annotations

import os

APP_TITLE = "cvcanvas"
APP_DESCRIPTION = "Compose CVs out of nested, stylable sections."

# Comma-separated origins allowed to call the API from a browser editor.
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CVCANVAS_CORS_ORIGINS", "").split(",") if origin.strip()]
