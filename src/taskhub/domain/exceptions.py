"""Domain exceptions.

Every exception carries the HTTP status and the machine-readable error code
the API reports for it, so the HTTP layer maps them in a single handler.
"""


class TaskHubError(Exception):
    """Base exception for TaskHub."""

    status = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "", *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


# --- 400 ---


class ValidationError(TaskHubError):
    """Validation failed for input data."""

    status = 400
    code = "VALIDATION_ERROR"


class InvalidId(ValidationError):
    """Identifier is not a well-formed object id."""

    code = "INVALID_ID"

    def __init__(self, identifier: object, what: str = "resource") -> None:
        super().__init__(f"Invalid {what} ID: {identifier!r}")
        self.identifier = identifier


class InvalidOrganizationId(InvalidId):
    """Organization id is not a well-formed object id."""

    def __init__(self, identifier: object) -> None:
        super().__init__(identifier, "organization")


class OrganizationRequired(ValidationError):
    """No organization supplied and the user has no current organization."""

    code = "ORGANIZATION_ID_REQUIRED"

    def __init__(self, message: str = "Organization ID is required") -> None:
        super().__init__(message)


# --- 401 ---


class AuthenticationRequired(TaskHubError):
    """Request carries no valid bearer credential."""

    status = 401
    code = "AUTHENTICATION_REQUIRED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


# --- 404 ---


class NotFound(TaskHubError):
    """Requested entity was not found."""

    status = 404
    code = "NOT_FOUND"

    def __init__(self, entity: str, identifier: object = None) -> None:
        message = f"{entity} not found"
        if identifier is not None:
            message = f"{message}: {identifier}"
        super().__init__(message)
        self.entity = entity
        self.identifier = identifier


class UserNotFound(NotFound):
    """Caller identity does not match a stored user."""

    status = 401
    code = "USER_NOT_FOUND"

    def __init__(self, identifier: object = None) -> None:
        super().__init__("User", identifier)


class OrganizationNotFound(NotFound):
    def __init__(self, identifier: object = None) -> None:
        super().__init__("Organization", identifier)


class MembershipNotFound(NotFound):
    def __init__(self, identifier: object = None) -> None:
        super().__init__("Membership", identifier)


class ResourceNotFound(NotFound):
    code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource_type: str, identifier: object = None) -> None:
        super().__init__(str(resource_type).capitalize(), identifier)


class RoleNotFound(NotFound):
    code = "ROLE_NOT_FOUND"

    def __init__(self, identifier: object = None, entity: str = "Role") -> None:
        super().__init__(entity, identifier)


class TemplateNotFound(NotFound):
    code = "TEMPLATE_NOT_FOUND"

    def __init__(self, identifier: object = None) -> None:
        super().__init__("Permission template", identifier)


class InvitationNotFound(NotFound):
    code = "INVITATION_NOT_FOUND"

    def __init__(self, identifier: object = None) -> None:
        super().__init__("Invitation", identifier)


# --- 403 ---


class AuthorizationError(TaskHubError):
    """Caller is authenticated but not allowed to perform the action."""

    status = 403
    code = "PERMISSION_DENIED"


class PermissionDenied(AuthorizationError):
    """User does not have permission for the requested action."""

    pass


class NotAMember(AuthorizationError):
    """User has no active membership in the organization."""

    code = "NOT_ORGANIZATION_MEMBER"

    def __init__(
        self, message: str = "You are not a member of this organization"
    ) -> None:
        super().__init__(message)


class NotOrganizationMember(NotAMember):
    """User is not a member of the organization that scopes a resource."""

    def __init__(
        self, message: str = "You are not a member of this resource's organization"
    ) -> None:
        super().__init__(message)


class NoOrganizationMembership(AuthorizationError):
    code = "NO_ORGANIZATION_MEMBERSHIP"

    def __init__(
        self, message: str = "You must be a member of at least one organization"
    ) -> None:
        super().__init__(message)


class InsufficientRole(AuthorizationError):
    code = "INSUFFICIENT_ROLE"

    def __init__(self, roles: tuple[str, ...] | list[str] = ()) -> None:
        message = "Your role does not allow this action"
        if roles:
            message = f"This action requires {' or '.join(roles)} role"
        super().__init__(message)
        self.roles = tuple(roles)


class InsufficientPermission(AuthorizationError):
    code = "INSUFFICIENT_PERMISSIONS"

    def __init__(self, permissions: tuple[str, ...] | list[str] = ()) -> None:
        message = "You don't have the required permissions for this action"
        if permissions:
            message = f"{message} ({', '.join(permissions)})"
        super().__init__(message)
        self.permissions = tuple(permissions)


class AccessDenied(AuthorizationError):
    code = "RESOURCE_ACCESS_DENIED"

    def __init__(
        self, message: str = "You don't have permission to access this resource"
    ) -> None:
        super().__init__(message)


# --- 409 ---


class ConflictError(TaskHubError):
    """Request conflicts with the current state of the target."""

    status = 409
    code = "CONFLICT"


class DuplicateName(ConflictError):
    code = "DUPLICATE_NAME"

    def __init__(self, entity: str, name: str) -> None:
        super().__init__(f"A {entity} with the name {name!r} already exists")


class DuplicateMembership(ConflictError):
    code = "DUPLICATE_MEMBERSHIP"

    def __init__(self, user_id: str, organization_id: str) -> None:
        super().__init__(
            f"User {user_id} already has an active membership in {organization_id}"
        )


class DuplicateInvitation(ConflictError):
    code = "DUPLICATE_INVITATION"

    def __init__(self, user_id: str, organization_id: str) -> None:
        super().__init__(
            f"User {user_id} already has a pending invitation to {organization_id}"
        )


class InvitationExpired(ConflictError):
    code = "INVITATION_EXPIRED"

    def __init__(self, message: str = "Invitation has expired") -> None:
        super().__init__(message)


class TemplateNotApplicable(ConflictError):
    code = "TEMPLATE_NOT_APPLICABLE"

    def __init__(self, template_name: str, resource_type: str) -> None:
        super().__init__(
            f"Template {template_name!r} is not applicable to {resource_type} resources"
        )


class TemplateInUse(ConflictError):
    code = "TEMPLATE_IN_USE"


class DefaultTemplateImmutable(ConflictError):
    code = "DEFAULT_TEMPLATE_IMMUTABLE"

    def __init__(self, message: str = "Default templates cannot be deleted") -> None:
        super().__init__(message)


class RoleInUse(ConflictError):
    code = "ROLE_IN_USE"


class SystemRoleImmutable(ConflictError):
    code = "SYSTEM_ROLE_IMMUTABLE"

    def __init__(self, message: str = "System roles cannot be modified") -> None:
        super().__init__(message)


class InvalidRoleTransition(ConflictError):
    code = "INVALID_ROLE_TRANSITION"


class LastAdmin(ConflictError):
    code = "LAST_ADMIN"

    def __init__(
        self, message: str = "Cannot remove the last admin from the organization"
    ) -> None:
        super().__init__(message)


# --- 500 ---


class InternalError(TaskHubError):
    """Persistence or other unexpected failure."""

    pass
