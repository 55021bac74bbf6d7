"""Machine entity — a production resource assignments are placed on."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Machine:
    id: str
    code: str
    name: str
    location: str | None = None

    @property
    def label(self) -> str:
        return f"{self.code} - {self.name}"
