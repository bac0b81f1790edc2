"""
Pure keyword classifiers for origin, packaging and certifications.
Each classifier is a tagged lookup (enum member -> keyword set); no I/O, no state.
Matching is case-insensitive substring, except the short tokens in _WORD_ONLY
which must stand alone ("pet" must not match "petroleum", "boks" must not match "plastboks").
"""
import re
from enum import Enum
from typing import Iterable, Optional


_WORD_ONLY = frozenset({"pet", "can", "tin", "boks", "msc", "asc"})


def contains_keyword(text: str, keyword: str) -> bool:
    """Case-insensitive keyword test used by every classifier in this module."""
    if not text or not keyword:
        return False
    t = text.lower()
    kw = keyword.lower()
    if kw in _WORD_ONLY:
        return re.search(r"(?<![a-zæøå0-9])" + re.escape(kw) + r"(?![a-zæøå0-9])", t) is not None
    return kw in t


def _first_keyword(text: str, keywords: Iterable[str]) -> Optional[str]:
    for kw in keywords:
        if contains_keyword(text, kw):
            return kw
    return None


# --- Origin ---

class OriginClass(str, Enum):
    NORWAY = "norway"
    NORDIC = "nordic"
    EU = "eu"
    FAR = "far"
    UNKNOWN = "unknown"


# Checked in declaration order; the first class with a hit wins
ORIGIN_KEYWORDS: dict[OriginClass, tuple[str, ...]] = {
    OriginClass.NORWAY: ("norway", "norge", "norwegian", "norsk", "noreg"),
    OriginClass.NORDIC: ("sweden", "sverige", "denmark", "danmark", "finland", "suomi"),
    OriginClass.EU: (
        "germany", "tyskland", "france", "frankrike", "netherlands", "nederland",
        "spain", "spania", "italy", "italia", "poland", "polen", "belgium", "belgia",
    ),
    OriginClass.FAR: (
        "peru", "chile", "brazil", "brasil", "argentina", "south africa", "sør-afrika",
        "australia", "new zealand", "new-zealand", "china", "kina", "india",
        "thailand", "vietnam",
    ),
}

TRANSPORT_SCORES: dict[OriginClass, int] = {
    OriginClass.NORWAY: 100,
    OriginClass.NORDIC: 80,
    OriginClass.EU: 50,
    OriginClass.UNKNOWN: 40,
    OriginClass.FAR: 20,
}


def classify_origin(text: str) -> tuple[OriginClass, Optional[str]]:
    """Return (class, matched keyword). Unmatched or empty text -> (UNKNOWN, None)."""
    for origin_class, keywords in ORIGIN_KEYWORDS.items():
        kw = _first_keyword(text, keywords)
        if kw is not None:
            return origin_class, kw
    return OriginClass.UNKNOWN, None


def transport_score(origin: str, is_norwegian: bool = False) -> int:
    if is_norwegian:
        return TRANSPORT_SCORES[OriginClass.NORWAY]
    origin_class, _ = classify_origin(origin)
    return TRANSPORT_SCORES[origin_class]


# --- Packaging ---

class PackagingMaterial(str, Enum):
    GLASS = "glass"
    PAPER = "paper"
    CARDBOARD = "cardboard"
    METAL = "metal"
    PET = "pet"
    RECYCLABLE_PLASTIC = "recyclable-plastic"
    PLASTIC = "plastic"
    UNKNOWN = "unknown"


# Priority order: the best material found decides the score
PACKAGING_KEYWORDS: dict[PackagingMaterial, tuple[str, ...]] = {
    PackagingMaterial.GLASS: ("glass", "verre"),
    PackagingMaterial.PAPER: ("paper", "papir", "papp"),
    PackagingMaterial.CARDBOARD: ("cardboard", "kartong", "carton", "tetra"),
    PackagingMaterial.METAL: ("metal", "aluminium", "aluminum", "steel", "hermetikk", "boks", "can", "tin"),
    PackagingMaterial.PET: ("pet", "plastflaske", "polyethylene-terephthalate", "01-pet"),
    PackagingMaterial.RECYCLABLE_PLASTIC: ("recyclable", "resirkulerbar", "hdpe", "pant"),
    PackagingMaterial.PLASTIC: ("plastic", "plast", "pose"),
}

PACKAGING_SCORES: dict[PackagingMaterial, int] = {
    PackagingMaterial.GLASS: 90,
    PackagingMaterial.PAPER: 90,
    PackagingMaterial.CARDBOARD: 90,
    PackagingMaterial.PET: 70,
    PackagingMaterial.RECYCLABLE_PLASTIC: 70,
    PackagingMaterial.PLASTIC: 40,
    PackagingMaterial.METAL: 50,
    PackagingMaterial.UNKNOWN: 50,
}


def detect_packaging_materials(text: str) -> list[PackagingMaterial]:
    """All materials mentioned in text, in priority order."""
    return [
        material
        for material, keywords in PACKAGING_KEYWORDS.items()
        if _first_keyword(text, keywords) is not None
    ]


def classify_packaging(text: str) -> PackagingMaterial:
    found = detect_packaging_materials(text)
    return found[0] if found else PackagingMaterial.UNKNOWN


def packaging_score(text: str) -> int:
    return PACKAGING_SCORES[classify_packaging(text)]


# --- Certifications ---

class Certification(str, Enum):
    NYT_NORGE = "nyt-norge"
    DEBIO = "debio"
    SVANEMERKET = "svanemerket"
    EU_ORGANIC = "eu-organic"
    OKOLOGISK = "okologisk"
    MSC = "msc"
    ASC = "asc"
    FAIRTRADE = "fairtrade"
    RAINFOREST_ALLIANCE = "rainforest-alliance"


CERTIFICATION_KEYWORDS: dict[Certification, tuple[str, ...]] = {
    Certification.NYT_NORGE: ("nyt norge", "nyt-norge"),
    Certification.DEBIO: ("debio",),
    Certification.SVANEMERKET: ("svanemerket", "nordic swan", "nordic-swan"),
    Certification.EU_ORGANIC: ("eu organic", "eu-organic"),
    Certification.OKOLOGISK: ("økologisk",),
    Certification.MSC: ("msc",),
    Certification.ASC: ("asc",),
    Certification.FAIRTRADE: ("fairtrade", "fair trade", "fair-trade"),
    Certification.RAINFOREST_ALLIANCE: ("rainforest alliance", "rainforest-alliance"),
}


def match_certification(label: str) -> Optional[Certification]:
    for cert, keywords in CERTIFICATION_KEYWORDS.items():
        if _first_keyword(label, keywords) is not None:
            return cert
    return None


def recognized_certifications(labels: Iterable[str]) -> list[Certification]:
    """Distinct certifications found anywhere in the label set, in catalogue order."""
    found: set[Certification] = set()
    for label in labels:
        if not isinstance(label, str):
            continue
        for cert, keywords in CERTIFICATION_KEYWORDS.items():
            if _first_keyword(label, keywords) is not None:
                found.add(cert)
    return [c for c in Certification if c in found]


def certification_score(labels: Iterable[str]) -> int:
    return min(100, 50 + 10 * len(recognized_certifications(labels)))
