"""
Sustainability score: a fixed-weight composite of five components, each explainable.
score() is pure and total: any CanonicalProduct, including the all-defaults one, yields a ScoreResult.

Weights: ecoscore 0.40, transport 0.25, norwegian 0.15, packaging 0.10, certifications 0.10.
"""
import logging

from gronnest.models.product import CanonicalProduct
from gronnest.models.score import BREAKDOWN_ORDER, BreakdownItem, ScoreResult
from gronnest.scoring.certifications import certification_info
from gronnest.scoring.classifiers import (
    PACKAGING_SCORES,
    TRANSPORT_SCORES,
    OriginClass,
    PackagingMaterial,
    certification_score,
    classify_origin,
    classify_packaging,
    recognized_certifications,
)
from gronnest.scoring.co2 import estimate_co2
from gronnest.scoring.grades import clamp_score, grade_from_total, upstream_grade_value
from gronnest.scoring.health import score_health

logger = logging.getLogger(__name__)

WEIGHTS = {
    "ecoscore": 0.40,
    "transport": 0.25,
    "norwegian": 0.15,
    "packaging": 0.10,
    "certifications": 0.10,
}

NORWEGIAN_SCORE = 100
IMPORTED_SCORE = 30

FULL_CREDIT = 20
PARTIAL_CREDIT = 10


def _ecoscore_item(product: CanonicalProduct) -> BreakdownItem:
    grade = product.ecoscore.grade
    if product.ecoscore.known:
        return BreakdownItem(
            score=upstream_grade_value(grade),
            label="Miljøpåvirkning",
            rationale=f"Eco-Score {grade.upper()}",
            data_available=True,
            quality_points=FULL_CREDIT,
        )
    return BreakdownItem(
        score=upstream_grade_value(grade),
        label="Miljøpåvirkning",
        rationale="Eco-Score ikke tilgjengelig, nøytral verdi brukt",
        data_available=False,
        quality_points=PARTIAL_CREDIT if product.ingredients.strip() else 0,
    )


def _transport_item(product: CanonicalProduct, origin_class: OriginClass, matched: str) -> BreakdownItem:
    label = "Transport"
    if product.is_norwegian or origin_class is OriginClass.NORWAY:
        return BreakdownItem(
            TRANSPORT_SCORES[OriginClass.NORWAY], label,
            "Norskprodusert, minimal transport", True, FULL_CREDIT,
        )
    score = TRANSPORT_SCORES[origin_class]
    if origin_class is OriginClass.NORDIC:
        return BreakdownItem(score, label, f"Fra {matched.title()}, kort transport", True, FULL_CREDIT)
    if origin_class is OriginClass.EU:
        return BreakdownItem(score, label, f"Fra {matched.title()} (Europa), moderat transport", True, FULL_CREDIT)
    if origin_class is OriginClass.FAR:
        return BreakdownItem(score, label, f"Lang transport fra {matched.title()}", True, FULL_CREDIT)
    origin = product.origin.strip()
    if origin:
        # Origin given but not in any known list: still the unknown-origin default
        return BreakdownItem(score, label, f"Opprinnelse: {origin[:25]}", False, PARTIAL_CREDIT)
    return BreakdownItem(score, label, "Opprinnelse ukjent, nøytral verdi brukt", False, 0)


def _norwegian_item(product: CanonicalProduct, origin_class: OriginClass) -> BreakdownItem:
    if product.is_norwegian:
        return BreakdownItem(NORWEGIAN_SCORE, "Norsk", "Norskprodusert", True, FULL_CREDIT)
    if origin_class is OriginClass.NORWAY:
        return BreakdownItem(IMPORTED_SCORE, "Norsk", "Norsk opprinnelse oppgitt, ikke bekreftet", True, FULL_CREDIT)
    if origin_class is not OriginClass.UNKNOWN:
        return BreakdownItem(IMPORTED_SCORE, "Norsk", "Ikke norskprodusert", True, FULL_CREDIT)
    return BreakdownItem(IMPORTED_SCORE, "Norsk", "Opprinnelse ukjent, antatt importert", False, 0)


_PACKAGING_RATIONALE = {
    PackagingMaterial.GLASS: "Glass, resirkulerbar",
    PackagingMaterial.PAPER: "Papir, resirkulerbar",
    PackagingMaterial.CARDBOARD: "Kartong, resirkulerbar",
    PackagingMaterial.METAL: "Metallemballasje",
    PackagingMaterial.PET: "PET, pant eller resirkulerbar",
    PackagingMaterial.RECYCLABLE_PLASTIC: "Resirkulerbar plast",
    PackagingMaterial.PLASTIC: "Plastemballasje",
}


def _packaging_item(product: CanonicalProduct) -> BreakdownItem:
    text = " ".join([*product.packaging.materials, product.packaging.text])
    material = classify_packaging(text)
    score = PACKAGING_SCORES[material]
    if material is not PackagingMaterial.UNKNOWN:
        return BreakdownItem(score, "Emballasje", _PACKAGING_RATIONALE[material], True, FULL_CREDIT)
    raw = product.packaging.text.strip()
    if raw:
        return BreakdownItem(score, "Emballasje", f"Emballasje: {raw[:25]}", False, PARTIAL_CREDIT)
    return BreakdownItem(score, "Emballasje", "Emballasje ukjent, nøytral verdi brukt", False, 0)


def _certifications_item(product: CanonicalProduct) -> tuple[BreakdownItem, tuple[str, ...]]:
    certs = recognized_certifications(product.labels)
    names = tuple(certification_info(c).name for c in certs)
    score = certification_score(product.labels)
    if certs:
        return BreakdownItem(score, "Sertifiseringer", ", ".join(names), True, FULL_CREDIT), names
    has_labels = any(isinstance(label, str) and label.strip() for label in product.labels)
    return BreakdownItem(
        score, "Sertifiseringer", "Ingen kjente sertifiseringer", False,
        PARTIAL_CREDIT if has_labels else 0,
    ), names


def score(product: CanonicalProduct) -> ScoreResult:
    origin_class, matched = classify_origin(product.origin)
    certifications, cert_names = _certifications_item(product)
    items = {
        "ecoscore": _ecoscore_item(product),
        "transport": _transport_item(product, origin_class, matched or ""),
        "norwegian": _norwegian_item(product, origin_class),
        "packaging": _packaging_item(product),
        "certifications": certifications,
    }
    breakdown = {key: items[key] for key in BREAKDOWN_ORDER}

    weighted = sum(breakdown[key].score * WEIGHTS[key] for key in BREAKDOWN_ORDER)
    total = clamp_score(weighted)
    data_quality = min(100, sum(item.quality_points for item in breakdown.values()))

    result = ScoreResult(
        total=total,
        grade=grade_from_total(total),
        breakdown=breakdown,
        data_quality=data_quality,
        health_score=score_health(product),
        co2_estimate=estimate_co2(product),
        certifications=cert_names,
    )
    logger.debug(
        "SCORE barcode=%s total=%s grade=%s data_quality=%s",
        product.barcode, result.total, result.grade.value, result.data_quality,
    )
    return result
