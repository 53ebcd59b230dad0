from abc import ABC, abstractmethod

from bookly.domain.entities.availability import Availability
from bookly.domain.entities.policy import BookingPolicy


class ProfileStorePort(ABC):
    @abstractmethod
    def read_availability(self, host_id: str) -> Availability:
        """Return the host's availability, or the default schedule if none is stored."""
        raise NotImplementedError

    @abstractmethod
    def read_policy(self, host_id: str) -> BookingPolicy:
        """Return the host's booking policy, or the default policy if none is stored."""
        raise NotImplementedError

    @abstractmethod
    def write_availability(self, host_id: str, availability: Availability) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_policy(self, host_id: str, policy: BookingPolicy) -> None:
        raise NotImplementedError
