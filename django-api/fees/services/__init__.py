from fees.services.fee_service import FeeService

__all__ = ["FeeService"]
