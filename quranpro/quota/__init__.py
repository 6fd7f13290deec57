from .service import QuotaService

__all__ = ["QuotaService"]
