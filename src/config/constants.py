from enum import Enum


class CacheView(str, Enum):
    """Catalog views the read cache knows how to hold."""

    ALL_PRODUCTS = "all-products"
    PRODUCT = "product"


class CacheScopes(str, Enum):
    SPECIFIC = "specific"  # Only the entity's own entry
    CATALOG = "catalog"  # Entity entry plus every bulk view depending on it


# Views rebuilt from the whole catalog rather than a single row
BULK_VIEWS = (CacheView.ALL_PRODUCTS,)

# Seed catalog used by scripts/db/seed_data.py
SEED_PRODUCTS = [
    {
        "name": "Rippled Screen Protector",
        "description": "For his or her sensory pleasure. Fits few known smartphones.",
        "price": 8.29,
        "quantity": 4,
    },
    {
        "name": "Wrap it and Hope Cover",
        "description": "Poor quality fake faux leather cover, loose enough to fit any mobile device.",
        "price": 5.78,
        "quantity": 45,
    },
    {
        "name": "Chocolate Cover",
        "description": "Purchase your favourite chocolate and use the provided heating element t melt it into the perfect cover for your phone.",
        "price": 11.82,
        "quantity": 1243,
    },
    {
        "name": "Water Bath Case",
        "description": "Place your device within the water-tight container, fill with water and enjoy the cushioned protection from bumps and bangs.",
        "price": 16.83,
        "quantity": 23,
    },
    {
        "name": "Smartphone Car Holder",
        "description": "Keep your smartphone handsfree with this large assembly that attaches to your rear window wiper.",
        "price": 97.02,
        "quantity": 43,
    },
]
