DEFAULT_ICON = "Circle"

ICON_GLYPHS = {
    "Wallet": "👛",
    "Laptop": "💻",
    "TrendingUp": "📈",
    "Gift": "🎁",
    "UtensilsCrossed": "🍽️",
    "Car": "🚗",
    "ShoppingBag": "🛍️",
    "Receipt": "🧾",
    "Gamepad2": "🎮",
    "Heart": "❤️",
    "GraduationCap": "🎓",
    "MoreHorizontal": "⋯",
    "Circle": "⚪",
    "Home": "🏠",
    "Plane": "✈️",
    "Phone": "📱",
    "Wifi": "📶",
    "Zap": "⚡",
    "Droplet": "💧",
    "CreditCard": "💳",
}

ICON_NAMES = tuple(ICON_GLYPHS)


def icon_glyph(name: str) -> str:
    return ICON_GLYPHS.get(name, ICON_GLYPHS[DEFAULT_ICON])
