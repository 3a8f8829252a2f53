"""Editable static catalog, customization and order configuration."""

from __future__ import annotations

CATEGORY_LABELS: dict[str, str] = {
    "all": "All",
    "starters": "Starters",
    "mains": "Mains",
    "desserts": "Desserts",
}

# Normal-mode key that opens the search pane for a category.
CATEGORY_KEYS: dict[str, str] = {
    "0": "all",
    "1": "starters",
    "2": "mains",
    "3": "desserts",
}

DIETARY_FILTERS: dict[str, str] = {
    "vegetarian": "Vegetarian",
    "vegan": "Vegan",
    "gluten_free": "Gluten Free",
    "promotion": "Promotions",
}

DIETARY_FILTER_KEYS: dict[str, str] = {
    "v": "vegetarian",
    "e": "vegan",
    "g": "gluten_free",
    "p": "promotion",
}

ADD_ON_CATALOG: dict[str, dict[str, str | float]] = {
    "extra_cheese": {"label": "Extra Cheese", "surcharge": 5.00},
    "bacon": {"label": "Bacon", "surcharge": 8.00},
    "extra_sauce": {"label": "Extra Sauce", "surcharge": 2.00},
    "no_onion": {"label": "No Onion", "surcharge": 0},
    "no_tomato": {"label": "No Tomato", "surcharge": 0},
    "whipped_cream": {"label": "Whipped Cream", "surcharge": 3.50},
    "ice_cream_scoop": {"label": "Ice Cream Scoop", "surcharge": 6.00},
}

REMOVAL_CATALOG: dict[str, str] = {
    "no_salt": "No Salt",
    "no_pepper": "No Pepper",
    "no_garlic": "No Garlic",
    "no_nuts": "No Nuts",
}

NOTE_KEY = "note"
NOTE_MAX_LENGTH = 120

CATEGORY_CUSTOMIZATION_DEFAULTS: dict[str, list[str]] = {
    "starters": ["extra_sauce", "no_onion", "no_salt", "no_pepper", "no_garlic"],
    "mains": ["extra_cheese", "bacon", "extra_sauce", "no_onion", "no_tomato", "no_salt", "no_pepper", "no_garlic"],
    "desserts": ["whipped_cream", "ice_cream_scoop", "no_nuts"],
}

DISH_CUSTOMIZATION_OVERRIDES: dict[str, dict[str, list[str]]] = {
    "garden_salad": {
        "add": ["extra_cheese", "no_tomato"],
        "remove": ["no_garlic"],
    },
    "veggie_burger": {
        "add": [],
        "remove": ["bacon"],
    },
    "mushroom_risotto": {
        "add": [],
        "remove": ["bacon", "no_tomato"],
    },
    "fruit_salad": {
        "add": [],
        "remove": ["ice_cream_scoop"],
    },
}

# Canonical dish metadata consumed by menu_order.data (which wraps these into Dish instances).
DISH_META_BY_ID: dict[str, dict[str, object]] = {
    "bruschetta": {
        "name": "Bruschetta",
        "description": "Toasted bread, tomato, basil and olive oil",
        "category": "starters",
        "price": 18.00,
        "promotion_price": None,
        "tags": ["vegetarian", "vegan"],
    },
    "garden_salad": {
        "name": "Garden Salad",
        "description": "Mixed greens with a lemon dressing",
        "category": "starters",
        "price": 22.00,
        "promotion_price": 19.90,
        "tags": ["vegetarian", "vegan", "gluten_free", "promotion"],
    },
    "fried_calamari": {
        "name": "Fried Calamari",
        "description": "Crispy squid rings with aioli",
        "category": "starters",
        "price": 34.00,
        "promotion_price": None,
        "tags": [],
    },
    "classic_burger": {
        "name": "Classic Burger",
        "description": "Beef patty, cheddar, lettuce and tomato",
        "category": "mains",
        "price": 39.90,
        "promotion_price": None,
        "tags": [],
    },
    "veggie_burger": {
        "name": "Veggie Burger",
        "description": "Chickpea patty with roasted peppers",
        "category": "mains",
        "price": 36.00,
        "promotion_price": 31.50,
        "tags": ["vegetarian", "promotion"],
    },
    "grilled_salmon": {
        "name": "Grilled Salmon",
        "description": "Salmon fillet with herb potatoes",
        "category": "mains",
        "price": 68.00,
        "promotion_price": None,
        "tags": ["gluten_free"],
    },
    "mushroom_risotto": {
        "name": "Mushroom Risotto",
        "description": "Arborio rice with wild mushrooms",
        "category": "mains",
        "price": 52.00,
        "promotion_price": None,
        "tags": ["vegetarian", "gluten_free"],
    },
    "lasagna": {
        "name": "Lasagna",
        "description": "Beef ragu lasagna",
        "category": "mains",
        "price": 48.00,
        "promotion_price": None,
        "tags": [],
        "available": False,
    },
    "chocolate_cake": {
        "name": "Chocolate Cake",
        "description": "Warm cake with a molten centre",
        "category": "desserts",
        "price": 24.00,
        "promotion_price": None,
        "tags": ["vegetarian"],
    },
    "fruit_salad": {
        "name": "Fruit Salad",
        "description": "Seasonal fruit with mint",
        "category": "desserts",
        "price": 16.00,
        "promotion_price": 12.00,
        "tags": ["vegetarian", "vegan", "gluten_free", "promotion"],
    },
}

ORDER_STATUS_LABELS: dict[str, str] = {
    "pending": "Order Received",
    "confirmed": "Confirmed",
    "preparing": "Preparing",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

TICKET_STATUSES: tuple[str, ...] = ("SAVED", "PRINTED", "PRINT_FAILED", "SKIPPED")

PAYMENT_METHODS: dict[str, str] = {
    "pix": "PIX",
    "credit_card": "Credit Card",
    "debit_card": "Debit Card",
}
