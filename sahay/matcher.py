"""Keyword matching over the offline knowledge base"""

import logging
from typing import Dict, List

from .exceptions import EmptyQueryError
from .knowledge import KnowledgeStore

logger = logging.getLogger(__name__)

AREA_MEDICAL = "Medical"
AREA_PCOS = "Women (PCOS)"
AREA_MENSTRUAL = "Menstrual Care"
AREA_PLANTS = "Plants"

_PCOS_TERMS = ("pcos", "pcod")
_MENSTRUAL_TERMS = ("period", "menstru")
_PLANT_TERMS = ("plant", "leaf")


class MatchResult:
    """One piece of advice matched to a query"""

    __slots__ = ("area", "advice")

    def __init__(self, area: str, advice: str):
        self.area = area
        self.advice = advice

    def to_dict(self) -> Dict:
        return {"area": self.area, "advice": self.advice}

    def __eq__(self, other):
        if not isinstance(other, MatchResult):
            return NotImplemented
        return self.area == other.area and self.advice == other.advice

    def __hash__(self):
        return hash((self.area, self.advice))

    def __repr__(self):
        return f"MatchResult(area={self.area!r}, advice={self.advice!r})"


def _contains_any(text: str, terms) -> bool:
    return any(term in text for term in terms)


class AdviceMatcher:
    """
    Substring search across the medical, women's health and plant datasets.

    Results come back grouped by rule (Medical, PCOS, Menstrual, Plants),
    each group in dataset order. No dedup, no scoring, no cap.
    """

    def __init__(self, store: KnowledgeStore):
        self.store = store

    def search(self, query: str) -> List[MatchResult]:
        if not query or not query.strip():
            raise EmptyQueryError("Query must not be empty")

        q = query.lower()
        results: List[MatchResult] = []
        results.extend(self._match_symptoms(q))
        results.extend(self._match_women(q))
        results.extend(self._match_plants(q))

        logger.debug(f"Query {q[:50]!r} matched {len(results)} entries")
        return results

    def _match_symptoms(self, q: str) -> List[MatchResult]:
        matches = []
        for symptom in self.store.symptoms():
            keywords = symptom.get("keywords") or ()
            if any(isinstance(k, str) and k.lower() in q for k in keywords):
                matches.append(MatchResult(AREA_MEDICAL, symptom.get("advice", "")))
        return matches

    def _match_women(self, q: str) -> List[MatchResult]:
        matches = []
        if _contains_any(q, _PCOS_TERMS):
            matches.extend(MatchResult(AREA_PCOS, a) for a in self.store.pcos_advice())
        if _contains_any(q, _MENSTRUAL_TERMS):
            matches.extend(MatchResult(AREA_MENSTRUAL, a) for a in self.store.menstrual_care())
        return matches

    def _match_plants(self, q: str) -> List[MatchResult]:
        diseases = self.store.diseases()
        # A generic plant/leaf mention returns every disease, not a filtered subset
        match_all = _contains_any(q, _PLANT_TERMS)
        matches = []
        for disease in diseases:
            name = disease.get("name") or ""
            care = disease.get("care") or ""
            if match_all or self._disease_matches(q, name, disease.get("signs") or ""):
                matches.append(MatchResult(AREA_PLANTS, f"{name}: {care}"))
        return matches

    @staticmethod
    def _disease_matches(q: str, name: str, signs: str) -> bool:
        """The query must contain the whole disease name or signs text"""
        for text in (name, signs):
            text = str(text).lower()
            if text and text in q:
                return True
        return False
