"""Medical specialty catalogue.

The database only checks that a specialty slug is non-empty
(validate_specialty_slug). The catalogue below is the authoritative list
the application validates against.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Specialty:
    slug: str
    code: str
    name: str


SPECIALTIES: tuple[Specialty, ...] = (
    Specialty("allergy-immunology", "AI", "Allergy & Immunology"),
    Specialty("anesthesiology", "ANE", "Anesthesiology"),
    Specialty("dermatology", "DERM", "Dermatology"),
    Specialty("emergency-medicine", "EM", "Emergency Medicine"),
    Specialty("family-medicine", "FM", "Family Medicine"),
    Specialty("internal-medicine", "IM", "Internal Medicine"),
    Specialty("medical-genetics", "MGG", "Medical Genetics"),
    Specialty("neurological-surgery", "NS", "Neurological Surgery"),
    Specialty("nuclear-medicine", "NM", "Nuclear Medicine"),
    Specialty("obstetrics-gynecology", "OBGYN", "Obstetrics & Gynecology"),
    Specialty("ophthalmology", "OPH", "Ophthalmology"),
    Specialty("orthopedic-surgery", "ORTHO", "Orthopedic Surgery"),
    Specialty("otolaryngology", "ENT", "Otolaryngology"),
    Specialty("pathology", "PATH", "Pathology"),
    Specialty("pediatrics", "PEDS", "Pediatrics"),
    Specialty("physical-medicine-rehabilitation", "PMR", "Physical Medicine & Rehabilitation"),
    Specialty("plastic-surgery", "PLAST", "Plastic Surgery"),
    Specialty("preventive-medicine", "PREV", "Preventive Medicine"),
    Specialty("psychiatry", "PSY", "Psychiatry"),
    Specialty("radiation-oncology", "RO", "Radiation Oncology"),
    Specialty("radiology", "RAD", "Radiology"),
    Specialty("surgery", "SURG", "Surgery"),
    Specialty("thoracic-surgery", "THOR", "Thoracic Surgery"),
    Specialty("urology", "URO", "Urology"),
    Specialty("dentistry", "DENT", "Dentistry"),
)

_BY_SLUG: dict[str, Specialty] = {s.slug: s for s in SPECIALTIES}


def get_specialty(slug: str) -> Specialty | None:
    """Look up a specialty by slug."""
    return _BY_SLUG.get(slug)


def is_known_specialty(slug: str | None) -> bool:
    """Check a slug against the catalogue. Empty and None are never known."""
    if not slug:
        return False
    return slug in _BY_SLUG
