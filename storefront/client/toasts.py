from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: str = "default"  # default | destructive


@dataclass
class Notifier:
    toasts: List[Toast] = field(default_factory=list)

    def success(self, description: str, title: str = "Success") -> None:
        self.toasts.append(Toast(title, description))

    def error(self, description: str, title: str = "Error") -> None:
        self.toasts.append(Toast(title, description, "destructive"))

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None
