"""
Part Category Classification

Rule-based mapping of free text (line item descriptions or part numbers) to one
of the eight fixed inventory category codes. The keyword table is ordered: the
first category with any keyword contained in the text wins, and text matching
nothing falls into the misc/other bucket.
"""

from enum import Enum
from types import MappingProxyType
from typing import Optional, Tuple


class CategoryCode(str, Enum):
    """Inventory category codes. Closed set."""
    MATERIAL = "m"
    ELECTRICAL = "e"
    ELECTRONICS = "t"
    SYSTEMS = "s"
    PLUMBING = "p"
    COMPRESSORS = "c"
    VACUUM = "v"
    MISC = "x"


DEFAULT_CATEGORY = CategoryCode.MISC

CATEGORY_LABELS = MappingProxyType({
    CategoryCode.MATERIAL: "Material",
    CategoryCode.ELECTRICAL: "Electrical",
    CategoryCode.ELECTRONICS: "Electronics",
    CategoryCode.SYSTEMS: "Systems",
    CategoryCode.PLUMBING: "Plumbing",
    CategoryCode.COMPRESSORS: "Compressors",
    CategoryCode.VACUUM: "Vacuum",
    CategoryCode.MISC: "Misc/Other",
})

# Checked top to bottom; order decides ties such as "vacuum pump" or
# "steel ball valve".
CATEGORY_KEYWORDS: Tuple[Tuple[CategoryCode, Tuple[str, ...]], ...] = (
    (CategoryCode.VACUUM, ("vacuum", "turbo", "roughing", "scroll", "diaphragm", "gauge", "manifold")),
    (CategoryCode.PLUMBING, ("valve", "fitting", "coupling", "hose", "pipe", "adapter", "plumbing")),
    (CategoryCode.MATERIAL, ("steel", "aluminum", "material", "tubing", "tube", "sheet", "plate", "rod", "bar")),
    (CategoryCode.ELECTRICAL, ("cable", "wire", "electrical", "power", "connector", "terminal", "junction")),
    (CategoryCode.ELECTRONICS, ("controller", "plc", "sensor", "electronic", "pcb", "circuit", "processor", "module")),
    (CategoryCode.SYSTEMS, ("system", "assembly", "chamber", "unit", "housing", "enclosure", "frame")),
    (CategoryCode.COMPRESSORS, ("compressor", "pump", "blower", "fan", "motor")),
    (CategoryCode.MISC, ("misc", "other", "tool", "consumable", "accessory", "hardware")),
)


def infer_category(text: Optional[str]) -> CategoryCode:
    """
    Infer the category code for a piece of free text.

    Args:
        text: Description or part number text

    Returns:
        The first category whose keyword occurs in the text, or MISC
    """
    if not text:
        return DEFAULT_CATEGORY

    lower_text = text.lower()

    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword in lower_text:
                return category

    return DEFAULT_CATEGORY


def category_label(code: CategoryCode) -> str:
    """Human-readable name for a category code."""
    try:
        return CATEGORY_LABELS[CategoryCode(code)]
    except ValueError:
        return "Unknown"
