PLANT_TYPES = [
    "Aloe Vera",
    "Apple Tree",
    "Calathea",
    "Cannabis",
    "Citrus Tree",
    "Corn",
    "Cucumber",
    "Dracaena",
    "Fern",
    "Fiddle Leaf Fig",
    "Grape Vine",
    "Monstera",
    "Orchid",
    "Peace Lily",
    "Pepper Plant",
    "Philodendron",
    "Pothos",
    "Rose",
    "Rubber Plant",
    "Snake Plant",
    "Soybean",
    "Spider Plant",
    "Succulent",
    "Tomato",
    "Wheat",
    "Zucchini",
    "ZZ Plant",
    "Fruit Tree (General)",
    "Houseplant (General)",
    "Vegetable (General)",
    "Other / Unknown",
]

# File types accepted from the uploader
UPLOAD_TYPES = ["png", "jpg", "jpeg", "webp"]


def is_known_plant_type(label: str) -> bool:
    return label in PLANT_TYPES
