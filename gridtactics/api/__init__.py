"""HTTP surface: FastAPI app, schemas, and routes."""
