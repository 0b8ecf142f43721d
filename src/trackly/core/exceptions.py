class DomainError(Exception):
    """Base class for errors the API reports to the client."""


class ValidationError(DomainError):
    """Bad input: malformed hours, unknown status key, missing review note..."""


class NotFoundError(DomainError):
    """The record, report, work item or user does not exist."""


class AuthenticationError(DomainError):
    """Wrong email/password or a disabled account."""


class AuthorizationError(DomainError):
    """The session user's role does not allow the action."""


class GatewayError(DomainError):
    """A remote callable function failed or is not configured."""
