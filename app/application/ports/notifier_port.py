"""Port interface for transient user-visible notifications."""

from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    def info(self, title: str, message: str) -> None:
        ...

    @abstractmethod
    def error(self, title: str, message: str) -> None:
        ...
