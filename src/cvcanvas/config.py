"""Local configuration for cvcanvas."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_STORAGE_BACKEND = "file"
DEFAULT_STORAGE_DIR = ".cvcanvas_store"
DEFAULT_HTTP_TIMEOUT_S = 10.0
DEFAULT_LOG_LEVEL = "INFO"

DOCUMENT_KEY_PREFIX = "cv_"
REGISTRY_KEY = "cvs"

# Padding of sections minted by a split and of the root of a new CV.
DEFAULT_SECTION_PADDING = "10px"
DEFAULT_ROOT_PADDING = "20px"

CVCANVAS_STORAGE_BACKEND = os.getenv("CVCANVAS_STORAGE_BACKEND", DEFAULT_STORAGE_BACKEND).strip().lower()
CVCANVAS_STORAGE_PATH = Path(os.getenv("CVCANVAS_STORAGE_PATH", DEFAULT_STORAGE_DIR)).expanduser().resolve()
CVCANVAS_STORAGE_URL = os.getenv("CVCANVAS_STORAGE_URL", "")
CVCANVAS_HTTP_TIMEOUT_S = float(os.getenv("CVCANVAS_HTTP_TIMEOUT_S", str(DEFAULT_HTTP_TIMEOUT_S)))
CVCANVAS_LOG_LEVEL = os.getenv("CVCANVAS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
