# src/nurture_forum/services/content_filter.py
"""Static phrase blocking for user submitted text.

A plain case-insensitive substring lookup; there is no scoring involved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

BLOCKED_REASON: Final = "Contains harmful, misleading, or abusive content"

# Fake cures, anti-vaccine claims and dehumanising language about autistic people.
ENGLISH_PHRASES: Final = (
    "mms", "miracle mineral solution", "bleach", "chlorine dioxide", "cd protocol",
    "chelation cures autism", "hyperbaric oxygen cures autism", "hb ot",
    "lupron protocol", "stem cell cure", "cure autism", "recover autism",
    "autism is reversible", "detox autism", "biomedical treatment cures",
    "gaps diet cures autism", "keto cures autism",
    "vaccines cause autism", "vaccine injury", "mmr caused autism",
    "autism epidemic from vaccines", "andrew wakefield",
    "low functioning", "high functioning", "severely autistic",
    "retard", "retarded", "autistic retard", "special needs retard",
    "burden on family", "better off dead", "should have been aborted",
    "vegetable", "not a real person", "soul-less", "possessed",
)

# Roman Urdu slurs and the same harmful claims as used by the Pakistani community.
ROMAN_URDU_PHRASES: Final = (
    "pagal", "pagal khanay ka", "deewana", "mental", "dimaghi mareez",
    "bewaqoof", "chutiya", "harami", "kanjar", "randi", "bhenchod", "madarchod",
    "ghatia", "nikamma", "nalayak", "bakwas band kar", "fuzool baatein",
    "autism ka ilaj", "autism theek ho sakta hai", "autism khatam karne ka tareeka",
    "bleach se autism theek", "vaccine ne autism diya", "teeka ne bacha bigad diya",
    "ye bacha kabhi theek nahi hoga", "is ko mar dalo", "aisi aulad se behtar abortion",
    "ye sirf pareshani hai", "ye janwar hai", "shaytan ka bacha",
    "homeo se autism theek", "hakeem se ilaj", "dua se autism chala jayega",
    "jinnat ki wajah se autism", "nazar lag gayi is liye",
)

BLOCKED_PHRASES: Final = ENGLISH_PHRASES + ROMAN_URDU_PHRASES


@dataclass(frozen=True)
class FilterResult:
    """Outcome of checking a piece of text."""

    blocked: bool
    reason: str | None = None


def check_content(text: str | None) -> FilterResult:
    """Return whether ``text`` contains any blocked phrase."""
    if not text:
        return FilterResult(blocked=False)

    lowered = text.lower()
    for phrase in BLOCKED_PHRASES:
        if phrase in lowered:
            return FilterResult(blocked=True, reason=BLOCKED_REASON)
    return FilterResult(blocked=False)
