"""
Exception taxonomy for the asset lifecycle.

Services raise these; route handlers catch them and flash the message
verbatim.  The three domain failures subclass ``ValueError`` so that
routes can keep catching ``ValueError`` for any user-facing refusal.

  - ``NotFound``      referenced id does not exist in the store.
  - ``InvalidState``  entity is in a status that forbids the operation.
  - ``Blocked``       delete refused because a relationship exists.
  - ``StoreError``    the persistence layer failed; opaque to callers.
"""


class AssetDeskError(Exception):
    """Base class for all application errors."""


class LifecycleError(AssetDeskError, ValueError):
    """Base class for refusals raised by the lifecycle engine and guard."""


class NotFound(LifecycleError):
    """A referenced entity id does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found.")


class InvalidState(LifecycleError):
    """The entity's current status forbids the requested operation."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid state: {reason}.")


class Blocked(LifecycleError):
    """A delete was refused because a relationship still exists."""

    def __init__(self, reason: str, asset_name: str | None = None):
        self.reason = reason
        self.asset_name = asset_name
        message = f"Cannot delete: {reason}"
        if asset_name:
            message += f' ("{asset_name}")'
        super().__init__(message + ". Please return the asset first.")


class StoreError(AssetDeskError):
    """The underlying persistence call failed."""


class ValidationError(AssetDeskError, ValueError):
    """One or more submitted form fields are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(" ".join(errors))
