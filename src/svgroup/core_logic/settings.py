from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class GraphSettings:
    """Flags controlling how graph identities are built.

    One instance is used for a whole collection run so that every identity
    in a grouping is derived the same way.

    Attributes:
        use_type (bool): Append the SV type to the chromosome.
        use_strand (bool): Append the STRANDS value after the type.
    """

    use_type: bool = False
    use_strand: bool = False

    def label(self) -> str:
        """Short description of the active flags, for log messages."""
        parts = ["chrom"]
        if self.use_type:
            parts.append("type")
        if self.use_strand:
            parts.append("strand")
        return "+".join(parts)
