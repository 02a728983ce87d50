from __future__ import annotations

from dataclasses import dataclass

from svgroup.core_logic.record import VcfRecord
from svgroup.core_logic.settings import GraphSettings


@dataclass(slots=True, frozen=True)
class Variant:
    """The part of a VCF record needed to merge it with others.

    Attributes:
        sample (int): Zero-based index of the source file in the file list.
        id (str): ID column of the record.
        start (int): POS of the record.
        end (int): ``start`` plus the signed SV length.
        graph_id (str): Grouping key, see :meth:`VcfRecord.graph_id`.
    """

    sample: int
    id: str
    start: int
    end: int
    graph_id: str

    @property
    def length(self) -> int:
        """Signed length (negative for deletions)."""
        return self.end - self.start


def variant_from_record(
    record: VcfRecord, sample: int, settings: GraphSettings
) -> Variant:
    """Summarise a record for grouping.

    Args:
        record (VcfRecord): Parsed VCF line.
        sample (int): Index of the file the record came from.
        settings (GraphSettings): Flags for the graph identity.

    Returns:
        Variant: Immutable summary of ``record``.

    Raises:
        InvalidPositionError: If POS is not an integer.
    """
    start = record.position
    return Variant(
        sample=sample,
        id=record.id,
        start=start,
        end=start + record.length,
        graph_id=record.graph_id(settings),
    )
