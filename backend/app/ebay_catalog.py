"""eBay category and item-condition reference data used to fill listing fields."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class EbayCategory:
    id: str
    name: str
    parent_name: Optional[str] = None


@dataclass(frozen=True)
class EbayCondition:
    id: str
    name: str
    description: str


COMPUTERS = "Computers/Tablets & Networking"
COMPONENTS = "Computer Components & Parts"
STORAGE_MEDIA = "Drives, Storage & Blank Media"
LAPTOPS = "Laptops & Netbooks"
ACCESSORIES = "Laptop & Desktop Accessories"
KEYBOARDS_MICE = "Keyboards & Mice"
TABLETS = "Tablets & eBook Readers"
NETWORKING = "Networking Products"
SERVERS = "Enterprise Networking, Servers"

# Order matters: lookups return the first entry for an id that appears twice.
CATEGORIES: List[EbayCategory] = [
    EbayCategory("179", "Desktop Computers", COMPUTERS),
    EbayCategory("175672", "Laptops & Netbooks", COMPUTERS),
    EbayCategory("80053", "Monitors", COMPUTERS),
    EbayCategory("171957", "All-In-One Desktops", COMPUTERS),
    EbayCategory("175673", "PC Laptops & Netbooks", LAPTOPS),
    EbayCategory("111418", "Apple Laptops", LAPTOPS),
    EbayCategory("171485", "2-in-1 Laptops", LAPTOPS),
    EbayCategory("31530", "Computer Components & Parts", COMPUTERS),
    EbayCategory("16145", "CPUs/Processors", COMPONENTS),
    EbayCategory("170083", "Memory (RAM)", COMPONENTS),
    EbayCategory("175669", "Solid State Drives", STORAGE_MEDIA),
    EbayCategory("56083", "Hard Drives (HDD, SSD & NAS)", STORAGE_MEDIA),
    EbayCategory("27386", "Graphics/Video Cards", COMPONENTS),
    EbayCategory("1244", "Motherboards", COMPONENTS),
    EbayCategory("42017", "Power Supplies", COMPONENTS),
    EbayCategory("131486", "Computer Cases", COMPONENTS),
    EbayCategory("165", "Keyboards & Mice", COMPUTERS),
    EbayCategory("3676", "Keyboards", KEYBOARDS_MICE),
    EbayCategory("23160", "Mice, Trackballs & Touchpads", KEYBOARDS_MICE),
    EbayCategory("182094", "Docking Stations", ACCESSORIES),
    EbayCategory("31534", "Laptop Batteries", ACCESSORIES),
    EbayCategory("31519", "Laptop Power Adapters/Chargers", ACCESSORIES),
    EbayCategory("171961", "Tablets & eBook Readers", COMPUTERS),
    EbayCategory("171485", "Apple iPad", TABLETS),
    EbayCategory("176972", "Android Tablets", TABLETS),
    EbayCategory("73839", "Networking Products", COMPUTERS),
    EbayCategory("11176", "Routers", NETWORKING),
    EbayCategory("175709", "Switches & Hubs", NETWORKING),
    EbayCategory("44995", "Printers", COMPUTERS),
    EbayCategory("19303", "Scanners", COMPUTERS),
    EbayCategory("4626", "Servers", SERVERS),
    EbayCategory("175698", "Server Memory (RAM)", SERVERS),
    EbayCategory("175699", "Server Hard Drives", SERVERS),
    EbayCategory("58058", "USB Flash Drives", STORAGE_MEDIA),
    EbayCategory("175698", "External Hard Drives", STORAGE_MEDIA),
    EbayCategory("86722", "Webcams", COMPUTERS),
    EbayCategory("162497", "Computer Cables & Connectors", COMPUTERS),
    EbayCategory("31530", "Other Computer Components", COMPONENTS),
]

CONDITIONS: List[EbayCondition] = [
    EbayCondition("1000", "New", "A brand-new, unused, unopened, undamaged item in its original packaging"),
    EbayCondition(
        "1500", "New other", "A new, unused item with no signs of wear. May be missing original packaging or tags."
    ),
    EbayCondition(
        "2000",
        "Certified - Refurbished",
        "Professionally restored to working order by a manufacturer-approved vendor.",
    ),
    EbayCondition("2500", "Seller refurbished", "The item has been restored to working order by the eBay seller."),
    EbayCondition(
        "3000", "Used", "An item that has been used previously. May have some signs of cosmetic wear."
    ),
    EbayCondition(
        "4000", "Very Good", "An item that is used but still in very good condition. No damage to the item itself."
    ),
    EbayCondition("5000", "Good", "An item in good working order but that may show signs of wear."),
    EbayCondition("6000", "Acceptable", "An item with obvious wear, but still fully operational and functional."),
    EbayCondition(
        "7000",
        "For parts or not working",
        "An item that does not function as intended and is not fully operational.",
    ),
]


def get_category(category_id: Optional[str]) -> Optional[EbayCategory]:
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None


def get_condition(condition_id: Optional[str]) -> Optional[EbayCondition]:
    for condition in CONDITIONS:
        if condition.id == condition_id:
            return condition
    return None


def category_name(category_id: Optional[str]) -> Optional[str]:
    """Display name for a category id; unknown ids are returned unchanged."""
    category = get_category(category_id)
    return category.name if category else category_id


def condition_name(condition_id: Optional[str]) -> Optional[str]:
    condition = get_condition(condition_id)
    return condition.name if condition else condition_id
