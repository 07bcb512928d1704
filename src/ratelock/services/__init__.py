"""Service layer — operations that return :class:`ServiceResult`."""

from ratelock.services.result import ServiceError, ServiceResult

__all__ = ["ServiceError", "ServiceResult"]
