"""HTTP surface: FastAPI app, routes, response envelope and failure mapping."""
