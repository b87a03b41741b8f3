"""
Clinical sections for printable comparison exports.

Sections are an ordered list of SectionSpec. Each canonical test lands in the
first section whose matcher accepts its category; tests nobody claims go to
the last section.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

from app.core.models.comparison import CanonicalTest

CategoryMatcher = Callable[[str], bool]


@dataclass(frozen=True)
class SectionSpec:
    """One titled section of the export."""
    title: str
    matcher: CategoryMatcher

    def matches(self, category: str) -> bool:
        return self.matcher(category or "")


def category_allowlist(*categories: str) -> CategoryMatcher:
    """Matcher accepting the given category labels (case-insensitive)."""
    allowed = {c.strip().lower() for c in categories}
    return lambda category: category.strip().lower() in allowed


def match_any(category: str) -> bool:
    return True


HEMATOLOGY = SectionSpec(
    title="1. Гематология (Общий анализ крови)",
    matcher=category_allowlist(
        "Общий анализ крови",
        "Лейкоцитарная формула",
        "Complete Blood Count",
    ),
)

BIOCHEMISTRY = SectionSpec(
    title="2. Биохимия и Гормоны",
    matcher=category_allowlist(
        "Метаболическая панель",
        "Функция печени",
        "Функция почек",
        "Липидный профиль",
        "Витамины и минералы",
        "Функция щитовидной железы",
        "Metabolic Panel",
        "Liver Function",
        "Kidney Function",
        "Lipid Profile",
        "Thyroid Function",
        "Vitamins & Minerals",
    ),
)

COAGULATION = SectionSpec(
    title="3. Коагулограмма (Свертываемость)",
    matcher=category_allowlist("Коагулограмма", "Coagulation"),
)

OTHER = SectionSpec(title="4. Дополнительные показатели", matcher=match_any)

DEFAULT_SECTIONS: List[SectionSpec] = [HEMATOLOGY, BIOCHEMISTRY, COAGULATION, OTHER]


def partition_tests(
    tests: Iterable[CanonicalTest],
    sections: Sequence[SectionSpec] = DEFAULT_SECTIONS,
) -> Dict[str, List[CanonicalTest]]:
    """
    Assign tests to sections.

    Args:
        tests: Canonical tests in display order
        sections: Ordered section list; the last one catches unmatched tests

    Returns:
        Section title -> tests, in section order (empty sections included)
    """
    if not sections:
        raise ValueError("At least one section is required")

    grouped: Dict[str, List[CanonicalTest]] = {s.title: [] for s in sections}
    fallback = sections[-1].title

    for test in tests:
        title = next((s.title for s in sections if s.matches(test.category)), fallback)
        grouped[title].append(test)

    return grouped
