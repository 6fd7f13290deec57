from .general_endpoints import router as general_router

__all__ = ["general_router"]
