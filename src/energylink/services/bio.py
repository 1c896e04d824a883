"""Templated electrician bio generation."""

from __future__ import annotations

from typing import Literal, Sequence

FALLBACK_BIOS = {
    "en": "Professional electrician with years of experience in residential and commercial projects.",
    "ar": "كهربائي محترف بخبرة سنوات في المشاريع السكنية والتجارية.",
}


def generate_bio(
    name: str,
    experience: int,
    specialties: Sequence[str],
    hourly_rate: float,
    language: Literal["en", "ar"] = "en",
) -> str:
    if not name.strip():
        return FALLBACK_BIOS[language]

    rate = f"{hourly_rate:g}"
    if language == "ar":
        skills = "، ".join(specialties) if specialties else "الأعمال الكهربائية العامة"
        return (
            f"كهربائي محترف {name} مع {experience} سنوات من الخبرة متخصص في {skills}. "
            "معتمد ومرخص مع التركيز على السلامة وجودة العمل ورضا العملاء. "
            f"السعر بالساعة: {rate} ريال. متاح للمشاريع السكنية والتجارية."
        )

    skills = ", ".join(specialties) if specialties else "general electrical work"
    return (
        f"Professional electrician {name} with {experience} years of experience specializing in {skills}. "
        "Certified and licensed with a focus on safety, quality workmanship, and customer satisfaction. "
        f"Hourly rate: ${rate}. Available for residential and commercial projects."
    )
