"""
Rough CO2 footprint per 100 g from a category keyword table.
Informational only; never part of the sustainability total.
"""
import re

from gronnest.models.product import CanonicalProduct
from gronnest.models.score import CO2Estimate

# (keywords, grams CO2 per 100 g, display category). First match wins, so high-impact
# and more specific entries come before generic ones ("butter" before "milk").
CO2_TABLE: tuple[tuple[tuple[str, ...], int, str], ...] = (
    (("beef", "storfe", "biff"), 2500, "Storfekjøtt"),
    (("lamb", "lammekjøtt", "lam"), 2400, "Lammekjøtt"),
    (("coffee", "kaffe"), 1700, "Kaffe"),
    (("butter", "smør"), 1200, "Smør"),
    (("cheese", "ost"), 1100, "Ost"),
    (("pork", "svin", "bacon", "skinke"), 720, "Svinekjøtt"),
    (("chicken", "kylling"), 450, "Kylling"),
    (("fish", "fisk", "laks", "salmon"), 400, "Fisk"),
    (("cream", "fløte", "rømme"), 350, "Fløte"),
    (("chocolate", "sjokolade"), 340, "Sjokolade"),
    (("eggs", "egg"), 320, "Egg"),
    (("rice", "ris"), 270, "Ris"),
    (("tofu",), 200, "Tofu"),
    (("yogurt", "yoghurt"), 150, "Yoghurt"),
    (("oat milk", "havremelk", "soy milk", "soyamelk", "plantemelk"), 40, "Plantemelk"),
    (("milk", "melk"), 130, "Melk"),
    (("pasta",), 120, "Pasta"),
    (("wine", "vin"), 120, "Vin"),
    (("bread", "brød"), 80, "Brød"),
    (("juice",), 80, "Juice"),
    (("legumes", "beans", "bønner"), 70, "Belgfrukter"),
    (("lentils", "linser"), 60, "Linser"),
    (("oats", "havre"), 60, "Havre"),
    (("beer", "øl"), 60, "Øl"),
    (("fruits", "fruit", "frukt"), 50, "Frukt"),
    (("soda", "brus"), 50, "Brus"),
    (("vegetables", "grønnsak"), 40, "Grønnsaker"),
    (("nuts", "nøtter"), 30, "Nøtter"),
)

PLANT_BASED_KEYWORDS = (
    "vegan", "vegansk", "plant-based", "plantebasert", "vegetar", "tofu", "seitan",
    "tempeh", "soya", "havre", "oatly", "alpro", "naturli", "quorn",
)
ANIMAL_KEYWORDS = (
    "beef", "biff", "kjøtt", "meat", "pork", "svin", "bacon", "chicken", "kylling",
    "fish", "fisk", "laks", "reke", "milk", "melk", "cheese", "ost", "smør",
    "fløte", "egg", "yoghurt", "yogurt", "skinke",
)

# Plant drinks named after milk; read as plant-based before the animal keywords are checked
PLANT_DRINK_TERMS = (
    "havremelk", "soyamelk", "mandelmelk", "rismelk", "plantemelk",
    "oat milk", "soy milk", "almond milk",
)

PLANT_BASED_FALLBACK = 80
UNKNOWN_FALLBACK = 300


def _has(text: str, keyword: str) -> bool:
    # Short words ("ost", "egg", "øl") only count as whole words
    if len(keyword) <= 3:
        return re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", text) is not None
    return keyword in text


def _search_text(product: CanonicalProduct) -> str:
    return " ".join([product.name, product.category, product.ingredients, " ".join(product.labels)]).lower()


def is_plant_based(product: CanonicalProduct) -> bool:
    text = _search_text(product)
    for term in PLANT_DRINK_TERMS:
        text = text.replace(term, "plantebasert")
    if any(_has(text, kw) for kw in ANIMAL_KEYWORDS):
        return False
    if any(_has(text, kw) for kw in PLANT_BASED_KEYWORDS):
        return True
    category = product.category.lower()
    return any(kw in category for kw in ("vegetable", "fruit", "grønnsak", "frukt"))


def estimate_co2(product: CanonicalProduct) -> CO2Estimate:
    text = _search_text(product)
    plant = is_plant_based(product)
    for keywords, grams, label in CO2_TABLE:
        if any(_has(text, kw) for kw in keywords):
            return CO2Estimate(grams, label, plant, f"~{grams}g CO₂/100g ({label})")
    if plant:
        return CO2Estimate(
            PLANT_BASED_FALLBACK, "Plantebasert", True,
            f"~{PLANT_BASED_FALLBACK}g CO₂/100g (plantebasert, estimert)",
        )
    return CO2Estimate(
        UNKNOWN_FALLBACK, "Ukjent", False,
        f"~{UNKNOWN_FALLBACK}g CO₂/100g (gjennomsnitt, estimert)",
    )
