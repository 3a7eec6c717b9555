"""MOBJ Patch - Remove region and country checks from MovieObject.bdmv."""
from .engine import CommandLocation, PatchSet, RegisterOverride, apply_patches, patch_bytes
from .regions import Region, country_override, find_region_checks, region_override

__all__ = [
    "CommandLocation",
    "PatchSet",
    "RegisterOverride",
    "Region",
    "apply_patches",
    "country_override",
    "find_region_checks",
    "patch_bytes",
    "region_override",
]
