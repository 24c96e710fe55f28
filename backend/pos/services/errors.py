# backend/pos/services/errors.py
from rest_framework import status


class PosError(Exception):
    code = "pos_error"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Operation failed."

    def __init__(self, detail=None, code=None):
        self.detail = detail or self.default_detail
        if code:
            self.code = code
        super().__init__(self.detail)


class ValidationError(PosError):
    code = "validation_error"
    default_detail = "Invalid data."


class EmptyBill(ValidationError):
    code = "empty_bill"
    default_detail = "Cannot generate an empty invoice."


class DealLineLocked(ValidationError):
    code = "deal_line_locked"
    default_detail = "Deal lines keep their bundle quantity; remove the line instead."


class InvalidBusinessDay(PosError):
    code = "invalid_business_day"
    default_detail = "Business day is not set or invalid."


class Unauthorized(PosError):
    code = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Operation not allowed."


class NotFound(PosError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."


class ReferenceNotFound(NotFound):
    code = "reference_not_found"

    def __init__(self, reference, detail=None):
        self.reference = reference
        super().__init__(detail or f"Reference not found: {reference}.")


class PersistenceError(PosError):
    code = "persistence_error"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not save, please retry."


class BillConflict(PosError):
    code = "bill_conflict"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The bill changed or is already being finalized. Reload it and try again."
