# Define version
VERSION = "1.0.0"


COMMON_COLS = ["CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
MIN_FIELDS = len(COMMON_COLS)

CHROM_COL = 0
POS_COL = 1
ID_COL = 2
REF_COL = 3
ALT_COL = 4
INFO_COL = 7

INFO_SEP = ";"
INFO_KV_SEP = "="
COMMENT_PREFIX = "#"


class InfoKey:
    SVLEN = "SVLEN"
    SVTYPE = "SVTYPE"
    SEQ = "SEQ"
    STRANDS = "STRANDS"


class SvType:
    INS = "INS"
    DEL = "DEL"
    UNKNOWN = ""  # REF and ALT of equal length, no SVTYPE


# single-base alleles used when the reference base does not matter
PLACEHOLDER_BASES = ("X", "N")
