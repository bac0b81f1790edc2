"""
Static table of common Norwegian grocery nouns. A query that hits one of these gets a
synthetic product so plain "banan" finds bananas before banana-flavoured milk.
"""
import re
from dataclasses import dataclass

from gronnest.models.product import CanonicalProduct

LOCAL_BARCODE_PREFIX = "local-"


@dataclass(frozen=True)
class LocalTerm:
    name: str
    category: str
    keywords: tuple[str, ...] = ()


LOCAL_TERMS: tuple[LocalTerm, ...] = (
    LocalTerm("Banan", "Frukt", ("banan", "bananer", "banana")),
    LocalTerm("Eple", "Frukt", ("eple", "epler", "apple")),
    LocalTerm("Pære", "Frukt", ("pære", "pærer", "pear")),
    LocalTerm("Appelsin", "Frukt", ("appelsin", "appelsiner", "orange")),
    LocalTerm("Sitron", "Frukt", ("sitron", "sitroner", "lemon")),
    LocalTerm("Druer", "Frukt", ("drue", "druer", "grapes")),
    LocalTerm("Jordbær", "Bær", ("jordbær", "strawberry", "strawberries")),
    LocalTerm("Blåbær", "Bær", ("blåbær", "blueberry", "blueberries")),
    LocalTerm("Bringebær", "Bær", ("bringebær", "raspberry", "raspberries")),
    LocalTerm("Potet", "Grønnsaker", ("potet", "poteter", "potato", "potatoes")),
    LocalTerm("Gulrot", "Grønnsaker", ("gulrot", "gulrøtter", "carrot", "carrots")),
    LocalTerm("Løk", "Grønnsaker", ("løk", "rødløk", "onion")),
    LocalTerm("Hvitløk", "Grønnsaker", ("hvitløk", "garlic")),
    LocalTerm("Tomat", "Grønnsaker", ("tomat", "tomater", "tomato")),
    LocalTerm("Agurk", "Grønnsaker", ("agurk", "agurker", "cucumber")),
    LocalTerm("Paprika", "Grønnsaker", ("paprika", "pepper")),
    LocalTerm("Brokkoli", "Grønnsaker", ("brokkoli", "broccoli")),
    LocalTerm("Blomkål", "Grønnsaker", ("blomkål", "cauliflower")),
    LocalTerm("Kål", "Grønnsaker", ("kål", "hodekål", "cabbage")),
    LocalTerm("Salat", "Grønnsaker", ("salat", "isbergsalat", "lettuce")),
    LocalTerm("Spinat", "Grønnsaker", ("spinat", "spinach")),
    LocalTerm("Kålrot", "Grønnsaker", ("kålrot", "swede", "rutabaga")),
    LocalTerm("Purre", "Grønnsaker", ("purre", "purreløk", "leek")),
    LocalTerm("Sopp", "Grønnsaker", ("sopp", "champignon", "mushroom")),
    LocalTerm("Avokado", "Frukt", ("avokado", "avocado")),
    LocalTerm("Mais", "Grønnsaker", ("mais", "maiskolbe", "corn")),
    LocalTerm("Ingefær", "Grønnsaker", ("ingefær", "ginger")),
    LocalTerm("Rødbete", "Grønnsaker", ("rødbete", "rødbeter", "beetroot")),
    LocalTerm("Egg", "Ferskvarer", ("egg", "eggs")),
    LocalTerm("Havregryn", "Ferskvarer", ("havregryn", "havre", "oats")),
)


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9æøå]+", "-", name.lower()).strip("-")


def to_product(term: LocalTerm) -> CanonicalProduct:
    """Synthetic entry: unprocessed and counted as Norwegian."""
    return CanonicalProduct(
        barcode=f"{LOCAL_BARCODE_PREFIX}{_slug(term.name)}",
        name=term.name,
        category=term.category,
        is_norwegian=True,
        nova_group=1,
    )


def is_local_product(product: CanonicalProduct) -> bool:
    return product.barcode.startswith(LOCAL_BARCODE_PREFIX)


def term_matches(term: LocalTerm, query: str) -> bool:
    q = query.strip().lower()
    if len(q) < 2:
        return False
    name = term.name.lower()
    words = q.split()
    # Prefix or whole word against the name and synonyms, never mid-word
    return any(w.startswith(q) or w in words for w in (name, *term.keywords))


def match_local_terms(query: str, terms: tuple[LocalTerm, ...] = LOCAL_TERMS) -> list[CanonicalProduct]:
    return [to_product(t) for t in terms if term_matches(t, query)]
