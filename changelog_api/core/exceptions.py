from fastapi import status


class WorkflowError(Exception):
    """Base error for status workflow operations"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(WorkflowError):
    """Bad input shape: empty, too long or duplicate names, broken order lists"""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ValidationError):
    """Duplicate display name, detected either up front or by the unique constraint"""
    status_code = status.HTTP_409_CONFLICT


class NotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND


class ReservedStatusError(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN


class LastStatusError(WorkflowError):
    status_code = status.HTTP_409_CONFLICT


class UnknownCategoryError(WorkflowError):
    status_code = status.HTTP_400_BAD_REQUEST


class CategoryCapacityError(WorkflowError):
    """Category is marked multiple=false and another status already holds it"""
    status_code = status.HTTP_409_CONFLICT


class ThemeManifestError(WorkflowError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
