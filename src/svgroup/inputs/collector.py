from __future__ import annotations

import gzip
import io
from pathlib import Path
from typing import Iterable

from loguru import logger

from svgroup.core_logic.constants import COMMENT_PREFIX
from svgroup.core_logic.record import (
    InvalidPositionError,
    MalformedRecordError,
    VcfRecord,
)
from svgroup.core_logic.settings import GraphSettings
from svgroup.core_logic.variants import Variant, variant_from_record

Grouping = dict[str, list[Variant]]


class MissingFileError(FileNotFoundError):
    """Exception raised when a file list or a listed VCF cannot be read.

    Attributes
    ----------
    path : Path
        The file that could not be opened.
    message : str
        Explanation of the error.
    """

    def __init__(self, path: Path | str, reason: str = "not found"):
        self.path = Path(path)
        self.message = f"Cannot read {self.path}: {reason}"
        super().__init__(self.message)


def _open_text_auto(path: Path) -> io.TextIOBase:
    """Open a plain or gzipped text file in text mode.

    Args:
        path (Path): Path to file.

    Returns:
        io.TextIOBase: Opened file handle.
    """
    if str(path).endswith(".gz"):
        return io.TextIOWrapper(gzip.open(path, mode="rb"), encoding="utf-8", newline="")
    return open(path, "rt", encoding="utf-8", newline="")


def _read_lines(path: Path | str) -> list[str]:
    """Read every line of ``path`` with line endings removed.

    Raises:
        MissingFileError: If the file is absent or unreadable.
    """
    path = Path(path)
    try:
        with _open_text_auto(path) as fh:
            return [line.rstrip("\r\n") for line in fh]
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise MissingFileError(path, reason=e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        logger.error(f"Failed to decode {path}: {e}")
        raise MissingFileError(path, reason=f"not valid UTF-8 ({e})") from e


def read_file_list(list_path: Path | str) -> list[str]:
    """Read a file of VCF paths, one per line, ignoring blank lines.

    Args:
        list_path (Path | str): Text file listing the VCFs.

    Returns:
        list[str]: Paths in list order.
    """
    return [line.strip() for line in _read_lines(list_path) if line.strip()]


def count_files(list_path: Path | str) -> int:
    """Number of VCF paths named in a file list."""
    return len(read_file_list(list_path))


def _data_lines(path: Path | str) -> Iterable[tuple[int, str]]:
    """``(line_number, line)`` for each record line, headers and blanks dropped."""
    for lineno, line in enumerate(_read_lines(path), start=1):
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        yield lineno, line


def read_vcf_records(path: Path | str) -> list[VcfRecord]:
    """Parse every data line of one VCF (plain or ``.gz``).

    Args:
        path (Path | str): VCF file.

    Returns:
        list[VcfRecord]: Records in file order.

    Raises:
        MissingFileError: If the file cannot be read.
        MalformedRecordError: If a line has fewer than 8 columns.
    """
    records: list[VcfRecord] = []
    for lineno, line in _data_lines(path):
        try:
            records.append(VcfRecord.from_line(line))
        except MalformedRecordError as e:
            logger.error(f"{path}:{lineno}: {e}")
            raise
    return records


def divide_into_graphs(variants: Iterable[Variant]) -> Grouping:
    """Bin variants by graph id, keeping their order within each bin.

    Args:
        variants (Iterable[Variant]): Variants to group.

    Returns:
        Grouping: graph id -> variants, keys in order of first appearance.
    """
    groups: Grouping = {}
    for variant in variants:
        groups.setdefault(variant.graph_id, []).append(variant)
    return groups


def read_sample(path: Path | str, sample: int, settings: GraphSettings) -> Grouping:
    """Read one VCF and group its variants by graph id.

    Args:
        path (Path | str): VCF file.
        sample (int): Index of the file in the file list.
        settings (GraphSettings): Flags for graph ids.

    Returns:
        Grouping: graph id -> variants of this file only.

    Raises:
        MissingFileError: If the file cannot be read.
        MalformedRecordError: If a line has fewer than 8 columns.
        InvalidPositionError: If a POS value is not an integer.
    """
    logger.debug(f"Reading sample {sample} from {path}")
    variants: list[Variant] = []
    for record in read_vcf_records(path):
        try:
            variants.append(variant_from_record(record, sample, settings))
        except InvalidPositionError as e:
            logger.error(f"{path}: {e} in record {record.id!r}")
            raise
    logger.info(f"{path} has {len(variants)} variants")
    return divide_into_graphs(variants)


def merge_groupings(groupings: Iterable[Grouping]) -> Grouping:
    """Concatenate per-file groupings key by key.

    Args:
        groupings (Iterable[Grouping]): One grouping per file, in file order.

    Returns:
        Grouping: Combined grouping with sorted keys; within a key, earlier
        groupings come first.
    """
    merged: Grouping = {}
    for grouping in groupings:
        for graph_id, variants in grouping.items():
            merged.setdefault(graph_id, []).extend(variants)
    return dict(sorted(merged.items()))


def read_grouped_variants(
    list_path: Path | str, settings: GraphSettings | None = None
) -> Grouping:
    """Read every VCF named in a file list and group all variants by graph id.

    Each variant is tagged with the zero-based index of its file in the list.
    Any unreadable file or bad record aborts the whole call.

    Args:
        list_path (Path | str): File list, one VCF path per line.
        settings (GraphSettings | None): Flags for graph ids; defaults to
            chromosome-only ids.

    Returns:
        Grouping: graph id -> variants from all files, file order preserved
        within each key.

    Example:
        >>> groups = read_grouped_variants("vcfs.txt", GraphSettings(use_type=True))
        >>> [v.sample for v in groups["chr1_DEL"]]
        [0, 1]
    """
    settings = settings or GraphSettings()
    logger.debug(f"Graph ids built from {settings.label()}")
    paths = read_file_list(list_path)
    per_file = [
        read_sample(path, sample, settings) for sample, path in enumerate(paths)
    ]
    merged = merge_groupings(per_file)
    logger.info(f"{len(paths)} files gave {len(merged)} graph ids")
    return merged
