from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Timestamped:
    created_at: datetime


@dataclass
class Paginated(Generic[T]):
    items: list[T]
    total: int
