"""Goldfish Engine - Ability Errors

Error taxonomy for ability dispatch. Card effects are resolved by matching
ability tags inside the resolution module; check_ability raises
InvalidAbilityError for a tag it does not know, which the catalog
validator reports. The other two are kept so a registry of ability
objects can report failures the same way.
"""


class AbilityError(Exception):
    """Base class for ability dispatch failures."""
    pass


class InvalidAbilityError(AbilityError):
    """Raised when an ability tag is not known to the dispatcher."""

    def __init__(self, ability: str):
        self.ability = ability
        super().__init__(f"Invalid ability: {ability}")


class AbilityExecutionError(AbilityError):
    """Raised when a known ability fails while resolving."""

    def __init__(self, message: str):
        super().__init__(f"Ability execution failed: {message}")


class InvalidStateError(AbilityError):
    """Raised when an ability finds the game in a state it cannot act on."""

    def __init__(self, message: str):
        super().__init__(f"Invalid state: {message}")


__all__ = [
    'AbilityError',
    'InvalidAbilityError',
    'AbilityExecutionError',
    'InvalidStateError',
]
