"""HTTP surface: routing, actions and the FastAPI application."""
