"""Base entity classes for Star Hunt integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import StarHuntDataCoordinator


class StarHuntCoordinatorEntity(CoordinatorEntity[StarHuntDataCoordinator]):
    """Base entity class for Star Hunt sensors with typed coordinator access."""

    @property
    def coordinator(self) -> StarHuntDataCoordinator:
        """Return typed coordinator.

        Reads the private _coordinator attribute set by CoordinatorEntity.
        """
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: StarHuntDataCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
