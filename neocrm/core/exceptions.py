class NeoCRMException(Exception):
    """Base exception for the NeoCRM access service"""

    pass


class UnauthorizedException(NeoCRMException):
    """Raised when access token validation fails"""

    pass


class NotFoundException(NeoCRMException):
    """Raised when resource not found"""

    pass


class ForbiddenException(NeoCRMException):
    """Raised when the caller's role or tenant does not allow the action"""

    pass


class ValidationException(NeoCRMException):
    """Raised for business logic validation errors"""

    pass


class UnknownRole(NeoCRMException):
    """Raised by RoleAuthority.rank for a role missing from the hierarchy"""

    def __init__(self, role):
        self.role = role
        super().__init__(f"Unknown role: {role!r}")


class TenantNotSelected(NeoCRMException):
    """Raised by tenant-scoped operations invoked with no current tenant"""

    pass


class TenantStorageError(NeoCRMException):
    """Raised by a tenant store when the durable write or read fails"""

    pass


class BackendAPIError(NeoCRMException):
    """Raised when the backend REST API answers with a non-2xx status"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)
