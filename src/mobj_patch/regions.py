"""Region and country checks in movie object programs.

Discs check playback eligibility by reading PSR 19 (country code) and
PSR 20 (region code) into a GPR and comparing. Forcing those reads to return
a constant removes the check without touching the comparison logic.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from mobj_core.model import MovieObjectFile, NavigationCommand, OperandCount, Psr
from mobj_core.protocol import PSR_COUNTRY, PSR_REGION, REGION_CHECK_PSRS

from .engine import CommandLocation, RegisterOverride


class Region(Enum):
    """Blu-ray region codes, as PSR 20 reports them."""

    # North and South America, U.S. territories, Japan, South Korea, Taiwan
    # and other areas of Southeast Asia.
    A = 0x1
    # Europe, Africa, Middle East, Australia and New Zealand.
    B = 0x2
    # Asia, except for the countries covered by region A.
    C = 0x4


def region_override(region: Region) -> RegisterOverride:
    return RegisterOverride(PSR_REGION, region.value.to_bytes(4, "big"))


def parse_country(text: str) -> str:
    """Validate an uppercase ISO 3166-1 alpha-2 code, e.g. "US" or "JP"."""
    if len(text) == 2 and all("A" <= c <= "Z" for c in text):
        return text
    raise ValueError("country must be an uppercase ISO 3166-1 alpha-2 code, e.g. 'US' or 'JP'")


def country_override(country: str) -> RegisterOverride:
    # PSR 19 holds the two ASCII characters in its low 16 bits.
    return RegisterOverride(PSR_COUNTRY, b"\x00\x00" + parse_country(country).encode("ascii"))


@dataclass(frozen=True)
class RegionCheck:
    location: CommandLocation
    command: NavigationCommand
    # False when PSR 19/20 shows up somewhere other than a source read.
    expected: bool


def _is_region_psr(operand) -> bool:
    return isinstance(operand, Psr) and operand.number in REGION_CHECK_PSRS


def find_region_checks(mobj: MovieObjectFile) -> list[RegionCheck]:
    checks: list[RegionCheck] = []
    for i, j, command in mobj.iter_commands():
        two_operands = command.operand_count == OperandCount.DESTINATION_AND_SOURCE
        if two_operands and _is_region_psr(command.source):
            checks.append(RegionCheck(CommandLocation(i, j), command, expected=True))
            continue

        # Both registers are read-only, so any other use is unusual. Report it anyway.
        used = []
        if command.operand_count >= OperandCount.DESTINATION_ONLY:
            used.append(command.destination)
        if two_operands:
            used.append(command.source)
        if any(_is_region_psr(operand) for operand in used):
            checks.append(RegionCheck(CommandLocation(i, j), command, expected=False))
    return checks
