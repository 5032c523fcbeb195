"""HTTP surface for the checkout bridge (FastAPI)."""
