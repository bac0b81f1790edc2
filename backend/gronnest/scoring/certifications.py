"""
Certification catalogue: display names and info links for recognised labels.
"""
from dataclasses import dataclass
from typing import Optional

from gronnest.scoring.classifiers import Certification, match_certification


@dataclass(frozen=True)
class CertificationInfo:
    id: str
    name: str
    name_en: str
    description: str
    url: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "nameEn": self.name_en,
            "description": self.description,
            "url": self.url,
        }


CERTIFICATIONS: dict[Certification, CertificationInfo] = {
    Certification.NYT_NORGE: CertificationInfo(
        "nyt-norge", "Nyt Norge", "Enjoy Norway",
        "Produsert i Norge med norske råvarer.",
        "https://www.nytnorge.no/",
    ),
    Certification.DEBIO: CertificationInfo(
        "debio", "Debio Økologisk", "Debio Organic",
        "Norsk sertifisering for økologisk produksjon.",
        "https://debio.no/",
    ),
    Certification.SVANEMERKET: CertificationInfo(
        "svanemerket", "Svanemerket", "Nordic Swan Ecolabel",
        "Det offisielle nordiske miljømerket.",
        "https://svanemerket.no/",
    ),
    Certification.EU_ORGANIC: CertificationInfo(
        "eu-organic", "EU Økologisk", "EU Organic",
        "Økologisk produksjon etter EUs økologiforordning.",
    ),
    Certification.OKOLOGISK: CertificationInfo(
        "okologisk", "Økologisk", "Organic",
        "Merket som økologisk produsert.",
    ),
    Certification.MSC: CertificationInfo(
        "msc", "MSC Bærekraftig Fiske", "MSC Sustainable Fishing",
        "Fisken er fanget på en bærekraftig måte.",
        "https://www.msc.org/",
    ),
    Certification.ASC: CertificationInfo(
        "asc", "ASC Bærekraftig Oppdrett", "ASC Sustainable Aquaculture",
        "Ansvarlig oppdrett av fisk og sjømat.",
        "https://www.asc-aqua.org/",
    ),
    Certification.FAIRTRADE: CertificationInfo(
        "fairtrade", "Fairtrade", "Fairtrade",
        "Rettferdig handel og bedre arbeidsforhold for bønder.",
        "https://fairtrade.no/",
    ),
    Certification.RAINFOREST_ALLIANCE: CertificationInfo(
        "rainforest-alliance", "Rainforest Alliance", "Rainforest Alliance",
        "Bærekraftig jordbruk som beskytter regnskog.",
        "https://www.rainforest-alliance.org/",
    ),
}


def certification_info(cert: Certification) -> CertificationInfo:
    return CERTIFICATIONS[cert]


def find_certification(label: str) -> Optional[CertificationInfo]:
    """Catalogue entry for a free-text label, or None if the label is not a known certification."""
    if not isinstance(label, str):
        return None
    cert = match_certification(label)
    if cert is not None:
        return CERTIFICATIONS[cert]
    lower = label.lower()
    for info in CERTIFICATIONS.values():
        if info.name.lower() in lower or info.name_en.lower() in lower:
            return info
    return None
