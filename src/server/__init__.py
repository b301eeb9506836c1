"""HTTP API for cvcanvas."""
