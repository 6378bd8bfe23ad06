"""Keyword lists used to classify search candidates."""

from dataclasses import dataclass

NON_FOOD_KEYWORDS: tuple[str, ...] = (
    # gifts
    "gift", "present", "mug", "cup", "tin", "box", "container", "jar", "bottle",
    "christmas", "mother's day", "father's day", "valentine", "birthday",
    "anniversary", "wedding", "party", "celebration", "holiday",
    # art and decor
    "watercolor", "texture", "design", "pattern", "art", "artwork", "painting",
    "drawing", "illustration", "photo", "picture", "image", "graphic",
    "decorative", "ornamental", "collectible", "souvenir", "memorabilia",
    # kitchenware
    "utensil", "tool", "appliance", "cookware", "bakeware", "dishware",
    "plate", "bowl", "fork", "spoon", "knife", "spatula", "whisk",
    # apparel
    "shirt", "t-shirt", "tshirt", "pants", "dress", "hat", "cap", "jacket",
    "sweater", "hoodie", "sweatshirt", "shoes", "boots", "sneakers",
    # electronics
    "phone", "laptop", "computer", "tablet", "camera", "headphones",
    "speaker", "charger", "cable", "wire", "battery",
    # media
    "book", "magazine", "newspaper", "cd", "dvd", "blu-ray", "vinyl",
    "poster", "calendar", "notebook", "journal", "diary",
    # toys
    "toy", "game", "puzzle", "card", "board", "doll", "stuffed", "plush",
    "action figure", "model", "miniature",
    # home and garden
    "plant", "flower", "seed", "fertilizer", "soil", "pot", "vase",
    "candle", "soap", "shampoo", "lotion", "cream", "oil",
    # office supplies
    "pen", "pencil", "paper", "folder", "binder", "stapler",
    "tape", "glue", "scissors", "ruler", "calculator",
)  # fmt: skip

BASIC_FOOD_KEYWORDS: tuple[str, ...] = (
    # fruits
    "apple", "orange", "banana", "grape", "strawberry", "blueberry", "raspberry",
    "peach", "pear", "plum", "cherry", "lemon", "lime", "grapefruit", "pineapple",
    "mango", "kiwi", "avocado", "tomato", "cucumber",
    # vegetables
    "carrot", "broccoli", "cauliflower", "spinach", "lettuce", "kale", "cabbage",
    "onion", "garlic", "potato", "sweet potato", "yam", "corn", "peas", "beans",
    # proteins
    "chicken", "beef", "pork", "fish", "salmon", "tuna", "shrimp", "egg",
    # dairy
    "milk", "cheese", "yogurt", "butter",
    # grains
    "bread", "rice", "pasta", "oatmeal", "quinoa", "brown rice", "wild rice",
    # nuts and seeds
    "almond", "walnut", "peanut", "cashew", "sunflower", "pumpkin", "flax",
    "olive", "coconut", "sesame", "chia",
)  # fmt: skip

PROCESSED_FOOD_KEYWORDS: tuple[str, ...] = (
    "juice", "soda", "pop", "drink", "beverage", "smoothie", "shake",
    "candy", "chips", "cookies", "cake", "pie", "ice cream", "dessert",
    "bar", "cereal", "snack", "treat", "crackers", "pretzels",
    "sauce", "dressing", "spread", "dip", "soup", "broth", "stock",
    "seasoning", "spice", "herb", "extract", "flavor", "syrup",
    # label adjectives
    "artificial", "natural", "organic", "gluten-free", "vegan", "vegetarian",
    "low-fat", "low-carb", "sugar-free", "diet", "light", "lite",
    "reduced", "fat-free", "zero", "fortified", "enriched",
    # packaging and processing
    "canned", "frozen", "dried", "dehydrated", "powdered", "concentrated",
    "pasteurized", "homogenized", "refined", "bleached", "hydrogenated",
)  # fmt: skip


@dataclass(frozen=True)
class KeywordLists:
    """Lowercase keyword lists matched as case-insensitive substrings."""

    non_food: tuple[str, ...] = NON_FOOD_KEYWORDS
    basic_food: tuple[str, ...] = BASIC_FOOD_KEYWORDS
    processed_food: tuple[str, ...] = PROCESSED_FOOD_KEYWORDS


DEFAULT_KEYWORDS = KeywordLists()
