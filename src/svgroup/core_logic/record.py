from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterator

from svgroup.core_logic.constants import (
    ALT_COL,
    CHROM_COL,
    ID_COL,
    INFO_COL,
    INFO_KV_SEP,
    INFO_SEP,
    MIN_FIELDS,
    PLACEHOLDER_BASES,
    POS_COL,
    REF_COL,
    InfoKey,
    SvType,
)
from svgroup.core_logic.settings import GraphSettings

_INTEGER = re.compile(r"[+-]?\d+")


class MalformedRecordError(ValueError):
    """Exception raised when a VCF data line has fewer than the 8 mandatory
    columns.

    Attributes
    ----------
    fields : list[str]
        The tab-separated tokens that were found.
    message : str
        Explanation of the error.
    """

    def __init__(self, fields: list[str]):
        self.fields = fields
        self.message = (
            f"VCF line had too few entries ({len(fields)} < {MIN_FIELDS}): {fields}"
        )
        super().__init__(self.message)


class InvalidPositionError(ValueError):
    """Exception raised when the POS column is not an integer.

    Attributes
    ----------
    value : str
        The raw POS token.
    message : str
        Explanation of the error.
    """

    def __init__(self, value: str):
        self.value = value
        self.message = f"Tried to access invalid VCF position: {value!r}"
        super().__init__(self.message)


class InvalidLengthError(ValueError):
    """Exception raised when an SVLEN value is missing or not a finite number.

    Attributes
    ----------
    value : str
        The raw SVLEN value ("" when absent).
    message : str
        Explanation of the error.
    """

    def __init__(self, value: str):
        self.value = value
        self.message = f"SVLEN is not numeric: {value!r}"
        super().__init__(self.message)


def parse_svlen(value: str) -> int:
    """Convert an SVLEN value to an integer, rounding half up.

    Args:
        value (str): Raw SVLEN text, e.g. ``"-250"`` or ``"10.4"``.

    Returns:
        int: ``floor(value + 0.5)``, so ``10.5`` gives 11 and ``-10.5`` gives -10.

    Raises:
        InvalidLengthError: If the value is empty, not a number, or not finite.
    """
    try:
        number = float(value)
    except ValueError as e:
        raise InvalidLengthError(value) from e
    if not math.isfinite(number):
        raise InvalidLengthError(value)
    return math.floor(number + 0.5)


def inserted_sequence(ref: str, alt: str) -> str:
    """Extract the bases ALT adds on top of REF.

    Trims the longest shared prefix and suffix, preferring the prefix at every
    step. When the flanks account for all of REF, the untrimmed middle of ALT
    is the insertion; otherwise REF is not embedded in ALT and ALT is
    returned unchanged.

    Args:
        ref (str): Reference allele.
        alt (str): Alternate allele, normally the longer of the two.

    Returns:
        str: Inserted sequence, or ``alt`` when no clean trim exists.

    Example:
        >>> inserted_sequence("ACGTACGT", "ACGTTTACGT")
        'TT'
    """
    start_pad = end_pad = 0
    while start_pad + end_pad < len(ref) and start_pad + end_pad < len(alt):
        if ref[start_pad] == alt[start_pad]:
            start_pad += 1
        elif ref[-1 - end_pad] == alt[-1 - end_pad]:
            end_pad += 1
        else:
            break
    if start_pad + end_pad == len(ref):
        return alt[start_pad : len(alt) - end_pad]
    return alt


@dataclass(slots=True)
class VcfRecord:
    """One structural variant line from a VCF file.

    The line is kept as its list of tab-separated tokens so it can be written
    back exactly, edits included. Everything else (position, length, type,
    sequence, graph identity) is derived on access, and errors surface only
    from the accessor that needs the bad value.

    Attributes:
        original_line (str): The line as read, without its newline.
        fields (list[str]): CHROM, POS, ID, REF, ALT, QUAL, FILTER, INFO and
            any further columns, in file order.
    """

    original_line: str
    fields: list[str] = field(repr=False)

    def __post_init__(self):
        if len(self.fields) < MIN_FIELDS:
            raise MalformedRecordError(self.fields)

    @classmethod
    def from_line(cls, line: str) -> VcfRecord:
        """Split a VCF data line into a record.

        Args:
            line (str): Tab-delimited data line (no trailing newline).

        Returns:
            VcfRecord: The parsed record.

        Raises:
            MalformedRecordError: If the line has fewer than 8 columns.
        """
        return cls(original_line=line, fields=line.split("\t"))

    def to_line(self) -> str:
        """Rejoin the (possibly edited) tokens into a VCF data line."""
        return "\t".join(self.fields)

    def __str__(self) -> str:
        return self.to_line()

    # ── fixed columns ----------------------------------------------------
    @property
    def chromosome(self) -> str:
        return self.fields[CHROM_COL]

    def set_chromosome(self, value: str) -> None:
        self.fields[CHROM_COL] = value

    @property
    def position(self) -> int:
        """1-based POS.

        Raises:
            InvalidPositionError: If POS is not an integer.
        """
        token = self.fields[POS_COL]
        if not _INTEGER.fullmatch(token):
            raise InvalidPositionError(token)
        return int(token)

    def set_position(self, value: int) -> None:
        self.fields[POS_COL] = str(value)

    @property
    def id(self) -> str:
        return self.fields[ID_COL]

    def set_id(self, value: str) -> None:
        self.fields[ID_COL] = value

    @property
    def ref(self) -> str:
        return self.fields[REF_COL]

    def set_ref(self, value: str) -> None:
        self.fields[REF_COL] = value

    @property
    def alt(self) -> str:
        return self.fields[ALT_COL]

    def set_alt(self, value: str) -> None:
        self.fields[ALT_COL] = value

    # ── INFO -------------------------------------------------------------
    def _info_pairs(self) -> Iterator[tuple[int, str, str, str]]:
        """Yield ``(offset, raw_pair, key, value)`` for every key=value pair.

        Bare flags (no ``=``) are skipped.
        """
        offset = 0
        for pair in self.fields[INFO_COL].split(INFO_SEP):
            key, sep, value = pair.partition(INFO_KV_SEP)
            if sep:
                yield offset, pair, key, value
            offset += len(pair) + len(INFO_SEP)

    def get_info(self, key: str) -> str:
        """Value of the first INFO pair named ``key``, or "" if there is none."""
        for _, _, name, value in self._info_pairs():
            if name == key:
                return value
        return ""

    def has_info(self, key: str) -> bool:
        """Whether a ``key=`` pair exists, even with an empty value."""
        return any(name == key for _, _, name, _ in self._info_pairs())

    def set_info(self, key: str, value: str) -> None:
        """Set an INFO value, adding the pair if it does not exist yet.

        An existing pair is rewritten where it stands, so the other pairs keep
        their text and order. New pairs go on the end.

        Args:
            key (str): INFO key, e.g. ``"SVLEN"``.
            value (str): New value.
        """
        info = self.fields[INFO_COL]
        updated = f"{key}{INFO_KV_SEP}{value}"
        for offset, pair, name, _ in self._info_pairs():
            if name != key:
                continue
            rest = info[offset + len(pair) :]
            if offset == 0:
                # first pair has no leading separator
                self.fields[INFO_COL] = updated + rest
            else:
                head = info[: offset - len(INFO_SEP)]
                self.fields[INFO_COL] = head + INFO_SEP + updated + rest
            return
        self.fields[INFO_COL] = info + INFO_SEP + updated

    @property
    def info(self) -> dict[str, str]:
        """INFO pairs as a dict in column order; the first duplicate wins."""
        out: dict[str, str] = {}
        for _, _, name, value in self._info_pairs():
            out.setdefault(name, value)
        return out

    # ── derived fields ---------------------------------------------------
    @property
    def svtype(self) -> str:
        """SV type tag.

        SVTYPE when set, else the name inside a symbolic ALT such as
        ``<DUP>``, else ``DEL``/``INS`` from the REF and ALT lengths. Alleles
        of equal length give ``""``.
        """
        declared = self.get_info(InfoKey.SVTYPE)
        if declared:
            return declared
        ref, alt = self.ref, self.alt
        if alt.startswith("<") and alt.endswith(">"):
            return alt[1:-1]
        if len(ref) > len(alt):
            return SvType.DEL
        if len(ref) < len(alt):
            return SvType.INS
        return SvType.UNKNOWN

    @property
    def strand(self) -> str:
        return self.get_info(InfoKey.STRANDS)

    @property
    def sequence(self) -> str:
        """Inserted (or, for deletions, removed) bases.

        A SEQ value always wins. Symbolic alleles carry no bases. Deletions are
        read as insertions with REF and ALT swapped, then the shared flanks are
        trimmed off (see :func:`inserted_sequence`).
        """
        if self.has_info(InfoKey.SEQ):
            return self.get_info(InfoKey.SEQ)
        ref, alt = self.ref, self.alt
        if alt.startswith("<"):
            return ""
        svtype = self.svtype
        if svtype == SvType.DEL:
            ref, alt = alt, ref
            svtype = SvType.INS
        if ref in PLACEHOLDER_BASES:
            return alt
        # REF is tested for "N" again here rather than ALT
        if alt == "X" or ref == "N":
            return ref
        if svtype == SvType.INS:
            return inserted_sequence(ref, alt)
        return alt

    @property
    def length(self) -> int:
        """Signed SV length, positive for insertions and negative otherwise.

        Taken from SVLEN when it is numeric; when SVLEN is absent or unusable
        the length of :attr:`sequence` is used instead.
        """
        try:
            return parse_svlen(self.get_info(InfoKey.SVLEN))
        except InvalidLengthError:
            size = len(self.sequence)
        return size if self.svtype == SvType.INS else -size

    @property
    def end(self) -> int:
        return self.position + self.length

    def graph_id(self, settings: GraphSettings) -> str:
        """Grouping key: chromosome, then optionally type and strand.

        Args:
            settings (GraphSettings): Which parts to include.

        Returns:
            str: e.g. ``"chr1"``, ``"chr1_DEL"`` or ``"chr1_DEL_+-"``.
        """
        graph_id = self.chromosome
        if settings.use_type:
            graph_id += "_" + self.svtype
        if settings.use_strand:
            graph_id += "_" + self.strand
        return graph_id
