# estately/bot/keyboards.py
from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from estately.filters import AREA_UNITS, CONSTRUCTION_STATUSES, CURRENCIES, PROPERTY_TYPES, FilterCriteria

# menu key -> (criteria field, fixed options); price brackets depend on the currency
MENUS = {
    "cur": ("price_currency", CURRENCIES),
    "type": ("property_type", PROPERTY_TYPES),
    "unit": ("area_unit", AREA_UNITS),
    "status": ("construction_status", CONSTRUCTION_STATUSES),
    "price": ("price_range_label", None),
}

def grid_keyboard(rows: list[list[tuple[str, str]]]) -> InlineKeyboardMarkup:
    """rows: [[(label, callback_data), ...], ...]"""
    kb = [[InlineKeyboardButton(text=txt, callback_data=data) for (txt, data) in row] for row in rows]
    return InlineKeyboardMarkup(kb)

def chunk(items, n):
    for i in range(0, len(items), n):
        yield items[i:i+n]

def menu_options(menu: str, criteria: FilterCriteria) -> list[str]:
    _, options = MENUS[menu]
    return criteria.price_brackets() if options is None else options

def filter_panel() -> InlineKeyboardMarkup:
    return grid_keyboard([
        [("💱 Currency", "flt:menu:cur"), ("💰 Price", "flt:menu:price")],
        [("🏠 Type", "flt:menu:type"), ("📐 Unit", "flt:menu:unit")],
        [("🚧 Status", "flt:menu:status"), ("🧹 Clear", "flt:clear")],
        [("📋 Show results", "flt:show")],
    ])

def options_keyboard(menu: str, criteria: FilterCriteria) -> InlineKeyboardMarkup:
    buttons = [(opt, f"flt:set:{menu}:{i}") for i, opt in enumerate(menu_options(menu, criteria))]
    rows = list(chunk(buttons, 2))
    rows.append([("All", f"flt:set:{menu}:all"), ("⬅️ Back", "flt:back")])
    return grid_keyboard(rows)
