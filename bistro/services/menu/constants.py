"""Menu presentation constants."""

# Shown when a menu item has no price; the stored item is never changed
DEFAULT_PRICE = 9.99

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x300?text=Food+Image"

CURRENCY_LABEL = "Rs"

CART_PATH = "/cart"

EMPTY_MESSAGE = "No items found. Try another search term."

LOAD_ERROR_MESSAGE = "We couldn't load the menu right now. Please try again."

NEW_BADGE = "NEW"
POPULAR_BADGE = "POPULAR"


def display_price(price) -> float:
    """Price to show for an item, falling back to the placeholder."""
    return DEFAULT_PRICE if price is None else float(price)


def format_price(price) -> str:
    """Format a price label for display."""
    return f"{CURRENCY_LABEL} {display_price(price):.2f}"
