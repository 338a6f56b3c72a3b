"""Built-in rate table for domestic (India) deliveries."""
from .schema import DeliverySpeed, RateTable, ShippingZone

METRO = ShippingZone(
    key="metro",
    name="Metro Cities",
    match_cities=[
        "mumbai", "delhi", "bangalore", "chennai",
        "kolkata", "hyderabad", "pune", "ahmedabad",
    ],
    base_cost=40,
    cost_per_kg=15,
    standard_days="1-2",
    express_days="Same Day",
)

TIER1 = ShippingZone(
    key="tier1",
    name="Tier 1 Cities",
    match_cities=[
        "jaipur", "lucknow", "kanpur", "nagpur", "indore",
        "thane", "bhopal", "visakhapatnam", "patna", "vadodara",
    ],
    base_cost=50,
    cost_per_kg=18,
    standard_days="2-3",
    express_days="1-2",
)

TIER2 = ShippingZone(
    key="tier2",
    name="Tier 2 Cities",
    match_cities=[
        "agra", "nashik", "faridabad", "meerut", "rajkot",
        "kalyan", "vasai", "bhiwandi", "saharanpur", "gorakhpur",
    ],
    base_cost=60,
    cost_per_kg=22,
    standard_days="3-4",
    express_days="2-3",
)

# Any city not listed above
OTHER = ShippingZone(
    key="tier3",
    name="Other Cities",
    match_cities=[],
    base_cost=75,
    cost_per_kg=25,
    standard_days="4-6",
    express_days="3-4",
)

STANDARD = DeliverySpeed(key="standard", name="Standard Delivery", multiplier=1.0, icon="🚚")
EXPRESS = DeliverySpeed(key="express", name="Express Delivery", multiplier=1.8, icon="⚡")
OVERNIGHT = DeliverySpeed(key="overnight", name="Overnight Delivery", multiplier=2.5, icon="🌙")

DEFAULT_RATE_TABLE = RateTable(
    zones=(METRO, TIER1, TIER2, OTHER),
    speeds=(STANDARD, EXPRESS, OVERNIGHT),
    free_shipping_threshold=1000,
    free_weight_allowance_kg=0.5,
    default_unit_weight_grams=250,
)
