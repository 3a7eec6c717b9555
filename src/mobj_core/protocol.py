"""MovieObject.bdmv protocol constants.

Single source of truth for the on-disc magic, field widths and bit layouts.
Keep this file stable. Decoder, encoder and patcher must remain synchronized.
"""

# File location relative to the disc root
MOVIE_OBJECT_PATH = "BDMV/MovieObject.bdmv"

# File magic
MAGIC = b"MOBJ0200"

# Header: [Magic(8) | ExtStart(4) | Reserved(28) | TableLen(4) | Reserved(4) | Count(2)] = 50 bytes
HEADER_FIELDS = (
    ("magic", 8),
    ("extension start address", 4),
    ("reserved", 28),
    ("movie objects length", 4),
    ("movie objects reserved", 4),
    ("movie objects count", 2),
)
HEADER_LEN = 50

# table_length counts everything after its own field: reserved(4) + count(2) + objects
TABLE_PREAMBLE_LEN = 4 + 2

# Movie object: [Flags(2) | CommandCount(2) | Commands(12 * n)]
U16_FMT = ">H"
U32_FMT = ">I"
OBJECT_PREAMBLE_LEN = 4

FLAG_RESUME_INTENTION = 1 << 15
FLAG_MENU_CALL_MASK = 1 << 14
FLAG_TITLE_SEARCH_MASK = 1 << 13
FLAG_RESERVED_MASK = 0x1FFF

# Navigation command: [OpcodeWord(4) | Destination(4) | Source(4)] = 96 bits
COMMAND_FMT = ">III"
COMMAND_LEN = 12

# Opcode word layout (bit positions within the big-endian u32 at offset 0)
OPERAND_COUNT_SHIFT = 29
GROUP_SHIFT = 27
SUB_GROUP_SHIFT = 24
DESTINATION_IMMEDIATE_BIT = 1 << 23
SOURCE_IMMEDIATE_BIT = 1 << 22
BRANCH_OPTION_SHIFT = 16
COMPARE_OPTION_SHIFT = 8
SET_OPTION_SHIFT = 0

OPERAND_COUNT_MASK = 0x7 << OPERAND_COUNT_SHIFT
GROUP_MASK = 0x3 << GROUP_SHIFT
SUB_GROUP_MASK = 0x7 << SUB_GROUP_SHIFT
BRANCH_OPTION_MASK = 0xF << BRANCH_OPTION_SHIFT
COMPARE_OPTION_MASK = 0xF << COMPARE_OPTION_SHIFT
SET_OPTION_MASK = 0x1F << SET_OPTION_SHIFT

# Command groups
GROUP_BRANCH = 0
GROUP_COMPARE = 1
GROUP_SET = 2

# Bits of the opcode word that carry meaning for each group. Everything else
# is wildcard or unused and is carried opaquely.
_COMMON_MASK = OPERAND_COUNT_MASK | GROUP_MASK | DESTINATION_IMMEDIATE_BIT | SOURCE_IMMEDIATE_BIT
SEMANTIC_MASKS = {
    GROUP_BRANCH: _COMMON_MASK | SUB_GROUP_MASK | BRANCH_OPTION_MASK,
    GROUP_COMPARE: _COMMON_MASK | COMPARE_OPTION_MASK,
    GROUP_SET: _COMMON_MASK | SUB_GROUP_MASK | SET_OPTION_MASK,
}

# Registers
U32_MAX = 0xFFFFFFFF
PSR_FLAG = 0x80000000
PSR_COUNT = 128
GPR_COUNT = 4096

# Player-specific registers of interest (both read-only)
PSR_COUNTRY = 19
PSR_REGION = 20
REGION_CHECK_PSRS = (PSR_COUNTRY, PSR_REGION)
