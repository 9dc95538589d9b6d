# estately/content.py
from urllib.parse import quote

from estately.config import settings

NAV_LINKS = [
    {"href": "/", "label": "Home"},
    {"href": "/about", "label": "About"},
    {"href": "/contact", "label": "Contact"},
    {"href": "/connect-agent", "label": "Connect with an Agent"},
    {"href": "/dashboard", "label": "Dashboard"},
]

DASHBOARD_CARDS = [
    {"icon": "search", "title": "Search Properties",
     "description": "Explore thousands of listings with our advanced search tools.", "href": "/listings"},
    {"icon": "heart", "title": "Save Favorites",
     "description": "Keep a list of your favorite homes and get instant updates.", "href": "#"},
    {"icon": "users", "title": "Connect with Agents",
     "description": "Find the perfect AI-matched agent to guide you through your journey.", "href": "/connect-agent"},
    {"icon": "shield-check", "title": "Secure Deals",
     "description": "Manage offers and close deals with our secure transaction system.", "href": "#"},
    {"icon": "trending-up", "title": "Smart Investment Insights",
     "description": "Use our AI analytics to identify high-value investment opportunities.", "href": "#"},
    {"icon": "line-chart", "title": "Explore Market Trends",
     "description": "Stay informed with up-to-date real estate market data and trends.", "href": "#"},
]


def map_embed_url(location: str | None) -> str:
    return f"https://maps.google.com/maps?q={quote(location or '')}&t=&z=13&ie=UTF8&iwloc=&output=embed"


def site_links() -> dict:
    return {"nav": NAV_LINKS, "telegram": settings.TELEGRAM_BOT_URL}
