# care_core/assignments/scoring.py
"""
Caregiver compatibility scoring.

Pure and deterministic: (patient, caregiver, live active caseload) -> score.
Each sub-score is computed on a 0-100 scale, then weighted; the weighted
sub-scores sum to a total in 0-100.

    specialty match   40%
    availability      25%
    caseload          25%
    experience        10%
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Iterable

NEUTRAL_SCORE = 50.0
MULTI_MATCH_BONUS = 1.2
MIN_WORD_LENGTH = 3

_WORD_SPLIT = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ScoreBreakdown:
    specialty_match: float
    availability: float
    caseload: float
    experience: float

    @property
    def total(self) -> float:
        return self.specialty_match + self.availability + self.caseload + self.experience

    def weighted(self, weights: "ScoreBreakdown") -> "ScoreBreakdown":
        return ScoreBreakdown(
            specialty_match=self.specialty_match * weights.specialty_match,
            availability=self.availability * weights.availability,
            caseload=self.caseload * weights.caseload,
            experience=self.experience * weights.experience,
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


WEIGHTS = ScoreBreakdown(
    specialty_match=0.40,
    availability=0.25,
    caseload=0.25,
    experience=0.10,
)

# rationale thresholds, applied to the unweighted 0-100 sub-scores
RATIONALE_THRESHOLDS = ScoreBreakdown(
    specialty_match=70,
    availability=80,
    caseload=70,
    experience=60,
)


@dataclass(frozen=True)
class CaregiverScore:
    caregiver: Any
    raw: ScoreBreakdown
    breakdown: ScoreBreakdown

    @property
    def total(self) -> float:
        return self.breakdown.total


def _words(text: str) -> set[str]:
    return {w for w in _WORD_SPLIT.split(text) if len(w) >= MIN_WORD_LENGTH}


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


def _matches(item: str, specialties: Iterable[str]) -> bool:
    """
    Case-insensitive containment in either direction, on the whole strings or
    on their words ("chronic-pain" matches "Pain Management" via "pain").
    """
    needle = item.lower()
    needle_words = _words(needle)
    for specialty in specialties:
        s = specialty.lower()
        if _contains_either_way(needle, s):
            return True
        if any(_contains_either_way(w, sw) for w in needle_words for sw in _words(s)):
            return True
    return False


def specialty_match_score(patient, caregiver) -> float:
    specialties = [s for s in (caregiver.specialties or []) if s]
    if not specialties:
        return NEUTRAL_SCORE  # generalist

    items = [i for i in patient.needs if i]
    if not items:
        return NEUTRAL_SCORE

    matched = sum(1 for item in items if _matches(item, specialties))
    ratio = matched / len(items)
    bonus = MULTI_MATCH_BONUS if matched > 1 else 1.0
    return min(100.0, ratio * 100 * bonus)


def availability_score(caregiver) -> float:
    slots = caregiver.weekly_slots
    if not slots:
        return NEUTRAL_SCORE

    if slots >= 40:
        return 100.0
    if slots >= 30:
        return 80.0
    if slots >= 20:
        return 60.0
    if slots >= 10:
        return 40.0
    return 20.0


def caseload_score(active_caseload: int) -> float:
    # sweet spot is 10-14; a near-empty caseload is mildly suspicious
    if active_caseload >= 25:
        return 10.0
    if active_caseload >= 20:
        return 40.0
    if active_caseload >= 15:
        return 80.0
    if active_caseload >= 10:
        return 100.0
    if active_caseload >= 5:
        return 90.0
    return 70.0


def experience_score(caregiver) -> float:
    years = caregiver.years_experience or 0
    specialty_count = len(caregiver.specialties or [])
    score = min(80, years * 10) + min(20, specialty_count * 5)
    return float(min(100, score))


def score_caregiver(patient, caregiver, active_caseload: int) -> CaregiverScore:
    raw = ScoreBreakdown(
        specialty_match=specialty_match_score(patient, caregiver),
        availability=availability_score(caregiver),
        caseload=caseload_score(active_caseload),
        experience=experience_score(caregiver),
    )
    return CaregiverScore(caregiver=caregiver, raw=raw, breakdown=raw.weighted(WEIGHTS))


def build_rationale(result: CaregiverScore, patient) -> str:
    # compared on raw sub-scores; weighted values (max 40/25/25/10) would never clear these
    raw = result.raw
    reasons = []

    if raw.specialty_match > RATIONALE_THRESHOLDS.specialty_match:
        needs = ", ".join(patient.diagnoses or []) or "patient needs"
        reasons.append(f"strong specialty match for {needs}")
    if raw.availability > RATIONALE_THRESHOLDS.availability:
        reasons.append("high availability")
    if raw.caseload > RATIONALE_THRESHOLDS.caseload:
        reasons.append("manageable current caseload")
    if raw.experience > RATIONALE_THRESHOLDS.experience:
        reasons.append("relevant experience")

    if not reasons:
        reasons.append("best available match among current caregivers")

    return f"Assigned to {result.caregiver.full_name} based on: {', '.join(reasons)}."
