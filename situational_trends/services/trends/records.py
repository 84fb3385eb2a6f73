"""Parsing of compact "W-L-P" betting records."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SituationalRecord:
    """Wins, losses and pushes parsed from a record string."""

    wins: int = 0
    losses: int = 0
    pushes: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.pushes


EMPTY_RECORD = SituationalRecord()


def parse_record(record: str | None) -> SituationalRecord:
    """
    Parse a record string such as "15-3-0" into counts.

    Trailing parts may be omitted ("15-3" has zero pushes). Missing,
    empty or non-numeric input returns the all-zero record, which the
    scorer treats as an unknown sample size.

    Args:
        record: Dash-separated wins, losses, pushes

    Returns:
        SituationalRecord with total = wins + losses + pushes
    """
    if not isinstance(record, str) or not record:
        return EMPTY_RECORD

    parts = record.strip().split("-")
    if len(parts) > 3:
        return EMPTY_RECORD

    counts = []
    for part in parts:
        part = part.strip()
        if not part.isdecimal():
            return EMPTY_RECORD
        counts.append(int(part))

    counts.extend([0] * (3 - len(counts)))
    return SituationalRecord(wins=counts[0], losses=counts[1], pushes=counts[2])


def over_wins(ou_record: str | None) -> int:
    """Overs hit in an O/U record ("10-15-0" = 10 overs)."""
    return parse_record(ou_record).wins


def under_wins(ou_record: str | None) -> int:
    """Unders hit in an O/U record ("10-15-0" = 15 unders)."""
    return parse_record(ou_record).losses
