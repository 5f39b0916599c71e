from .articles import router

__all__ = ["router"]
