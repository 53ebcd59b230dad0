from abc import ABC, abstractmethod


class MeetingLinkPort(ABC):
    @abstractmethod
    def generate(self) -> str:
        """Return a well-formed, practically unique meeting-join URL."""
        raise NotImplementedError
