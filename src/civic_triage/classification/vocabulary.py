"""
Static keyword dictionaries for complaint triage.

A Vocabulary is read-only once built: term lists are tuples and every
mapping is wrapped in MappingProxyType. Build a custom instance with
Vocabulary.create() to substitute terms in tests or deployments.
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple
from dataclasses import dataclass

from civic_triage.core.config import get_config

URGENCY_TERMS = (
    # Emergency
    'urgent', 'emergency', 'critical', 'immediate', 'asap', 'now',
    'fire', 'flood', 'gas leak', 'water leak', 'electrical', 'power outage',
    'dangerous', 'hazard', 'unsafe', 'risk', 'threat', 'threatening',

    # Damage
    'broken', 'damaged', 'collapsed', 'cracked', 'leaking', 'flooding',
    'blocked', 'clogged', 'overflowing', 'burst', 'explosion',

    # Safety
    'injury', 'injured', 'hurt', 'bleeding', 'trapped', 'stuck',
    'poisoning', 'toxic', 'contaminated', 'exposed',

    # Severity
    'major', 'severe', 'serious', 'massive', 'huge', 'extensive',
    'widespread', 'multiple', 'numerous', 'many',
)

DEPARTMENT_TERMS = {
    'Public Works': (
        'road', 'street', 'pothole', 'pavement', 'sidewalk', 'curb',
        'water', 'sewer', 'drain', 'pipe', 'utility', 'infrastructure',
        'maintenance', 'repair', 'construction', 'bridge', 'tunnel',
    ),
    'Police Department': (
        'crime', 'theft', 'robbery', 'assault', 'violence', 'fight',
        'noise', 'disturbance', 'loud', 'party', 'music', 'shouting',
        'traffic', 'parking', 'speeding', 'accident', 'collision',
        'safety', 'security', 'suspicious', 'trespassing', 'vandalism',
    ),
    'Parks Department': (
        'park', 'playground', 'recreation', 'green space', 'garden',
        'trees', 'grass', 'landscaping', 'sports field', 'court',
        'bench', 'trail', 'path', 'fountain', 'pond', 'lake',
    ),
    'Code Enforcement': (
        'building', 'construction', 'permit', 'zoning', 'violation',
        'compliance', 'illegal', 'unauthorized', 'code', 'regulation',
        'property', 'structure', 'renovation', 'demolition',
    ),
    'Sanitation': (
        'garbage', 'trash', 'recycling', 'pickup', 'collection',
        'waste', 'cleaning', 'littering', 'dumping', 'smell',
        'odor', 'bins', 'containers', 'disposal',
    ),
    'Fire Department': (
        'fire', 'smoke', 'burning', 'flames', 'gas', 'propane',
        'hazard', 'alarm', 'detector', 'sprinkler', 'hydrant',
        'carbon monoxide', 'explosion', 'chemical', 'rescue',
    ),
}

# Importance multipliers; categories without a department entry are kept so
# that stored category names resolve to a weight too.
DEPARTMENT_IMPORTANCE = {
    'Safety': 4,
    'Infrastructure': 3,
    'Public Works': 3,
    'Fire Department': 4,
    'Police Department': 4,
    'Code Enforcement': 2,
    'Parks Department': 2,
    'Sanitation': 2,
}

LOCATION_TERMS = (
    'downtown', 'uptown', 'residential', 'commercial', 'industrial',
    'school', 'hospital', 'mall', 'intersection', 'highway', 'bridge',
)

PRIORITY_WEIGHTS = {
    'urgency_keywords': 4,
    'sentiment_score': 2,
    'keyword_density': 1,
    'length_factor': 0.5,
}

@dataclass(frozen=True)
class Vocabulary:
    """Immutable bundle of every dictionary the classifier reads"""
    urgency_terms: Tuple[str, ...]
    department_terms: Mapping[str, Tuple[str, ...]]
    department_importance: Mapping[str, int]
    location_terms: Tuple[str, ...]
    priority_weights: Mapping[str, float]
    fallback_department: str = 'Public Works'

    @classmethod
    def create(cls,
               urgency_terms: Iterable[str] = URGENCY_TERMS,
               department_terms: Optional[Mapping[str, Iterable[str]]] = None,
               department_importance: Optional[Mapping[str, int]] = None,
               location_terms: Iterable[str] = LOCATION_TERMS,
               priority_weights: Optional[Mapping[str, float]] = None,
               fallback_department: str = 'Public Works') -> "Vocabulary":
        """
        Build a frozen vocabulary, copying every input.

        Terms are lowercased; department enumeration order follows the
        insertion order of ``department_terms``.
        """
        if department_terms is None:
            department_terms = DEPARTMENT_TERMS
        if department_importance is None:
            department_importance = DEPARTMENT_IMPORTANCE

        weights = dict(PRIORITY_WEIGHTS)
        if priority_weights:
            unknown = set(priority_weights) - set(PRIORITY_WEIGHTS)
            if unknown:
                raise ValueError(f"Unknown priority weights: {', '.join(sorted(unknown))}")
            weights.update(priority_weights)

        departments: Dict[str, Tuple[str, ...]] = {
            name: _freeze_terms(terms) for name, terms in department_terms.items()
        }

        return cls(
            urgency_terms=_freeze_terms(urgency_terms),
            department_terms=MappingProxyType(departments),
            department_importance=MappingProxyType(dict(department_importance)),
            location_terms=_freeze_terms(location_terms),
            priority_weights=MappingProxyType(weights),
            fallback_department=fallback_department,
        )

    @property
    def departments(self) -> Tuple[str, ...]:
        """Department names in enumeration order"""
        return tuple(self.department_terms)

    def importance(self, department: str) -> int:
        """Importance multiplier for a department (1 when not listed)"""
        return self.department_importance.get(department, 1)


def _freeze_terms(terms: Iterable[str]) -> Tuple[str, ...]:
    return tuple(term.lower() for term in terms)


DEFAULT_VOCABULARY = Vocabulary.create(fallback_department=get_config().FALLBACK_DEPARTMENT)
