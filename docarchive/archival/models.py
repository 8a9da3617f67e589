from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConversionResult:
    """Location of a rendered archival artifact and its conformance status."""

    artifact_path: Path
    conformant: bool = True
