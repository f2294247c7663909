from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ExtractionStatus(str, Enum):
    EXTRACTED = "extracted"
    EMPTY = "empty"
    FAILED = "failed"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ExtractionRequest:
    url: str
    site: str = ""


@dataclass
class ExtractionResult:
    request: ExtractionRequest
    status: ExtractionStatus
    strategy: Optional[str] = None
    images: list[str] = field(default_factory=list)
    next_url: Optional[str] = None
    prev_url: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ExtractionStatus.EXTRACTED

    def to_dict(self) -> dict:
        return {
            "url": self.request.url,
            "site": self.request.site,
            "status": self.status.value,
            "strategy": self.strategy,
            "images": list(self.images),
            "next_url": self.next_url,
            "prev_url": self.prev_url,
            "error": self.error,
        }
