"""Route modules for the API."""
from api.routes import health, summary_gate, understanding

__all__ = ["health", "summary_gate", "understanding"]
