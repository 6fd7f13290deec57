from .service import TrackingService, clamp_limit

__all__ = ["TrackingService", "clamp_limit"]
