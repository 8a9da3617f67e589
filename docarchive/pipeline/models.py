from dataclasses import dataclass
from datetime import date
from enum import Enum


class Direction(str, Enum):
    INCOMING = "Incoming"
    OUTGOING = "Outgoing"


class PipelineState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    EXTRACTED = "extracted"
    CONVERTED = "converted"
    STORED = "stored"
    FAILED = "failed"


@dataclass(frozen=True)
class RawUpload:
    """An uploaded file as received over HTTP. Never persisted."""

    content: bytes
    mime_type: str
    file_name: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class DocumentMetadata:
    """Validated letter metadata attached to a committed document."""

    direction: Direction
    letter_date: date
    letter_number: str
    sender: str
    recipient: str
    subject: str
    summary: str
    reference: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "incomingOutgoing": self.direction.value,
            "letterDate": self.letter_date.isoformat(),
            "letterNumber": self.letter_number,
            "from": self.sender,
            "to": self.recipient,
            "subject": self.subject,
            "reference": self.reference,
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "DocumentMetadata":
        return cls(
            direction=Direction(data["incomingOutgoing"]),
            letter_date=date.fromisoformat(data["letterDate"]),
            letter_number=data["letterNumber"],
            sender=data["from"],
            recipient=data["to"],
            subject=data["subject"],
            summary=data["summary"],
            reference=data.get("reference", ""),
        )
