"""HTTP control surface for a hosted arena."""
from .router import router

__all__ = ["router"]
