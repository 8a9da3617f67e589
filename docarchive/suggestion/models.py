from dataclasses import dataclass


@dataclass(frozen=True)
class MetadataSuggestion:
    """Best-effort letter metadata proposed from extracted text.

    Every field may be None when the text gives no clear answer.
    """

    direction: str | None = None
    letter_date: str | None = None
    reference: str | None = None
    sender: str | None = None
    recipient: str | None = None
    subject: str | None = None
    additional_reference: str | None = None
    summary: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "type": self.direction,
            "date": self.letter_date,
            "reference": self.reference,
            "from": self.sender,
            "to": self.recipient,
            "subject": self.subject,
            "additionalReference": self.additional_reference,
            "summary": self.summary,
        }
