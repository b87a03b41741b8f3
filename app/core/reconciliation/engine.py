"""
ReconciliationEngine - align tests from several reports into one matrix.

Steps:
1. Stable-sort reports by parsed date (undated reports first)
2. Group reports into date columns by raw date string
3. Order columns by parsed date
4. Accumulate canonical tests; metadata comes from the first observation
5. Value lookup is first-match-wins within a column (see ComparisonMatrix)
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.builders.date_utils import calendar_key, parse_report_date
from app.core.exceptions import NormalizationError
from app.core.extraction.name_normalizer import NameNormalizer, NormalizationResult
from app.core.models.comparison import CanonicalTest, ComparisonMatrix, DateColumn
from app.core.models.report import ReportSnapshot

logger = logging.getLogger(__name__)


def collect_names(reports: Iterable[ReportSnapshot]) -> List[str]:
    """Distinct raw test names across reports, in first-seen order."""
    seen: Dict[str, None] = {}
    for report in reports:
        for test in report.tests:
            if test.name:
                seen.setdefault(test.name, None)
    return list(seen)


def resolve_mapping(names: Iterable[str], result: Optional[NormalizationResult]) -> Dict[str, str]:
    """Total name mapping: every raw name gets a canonical name.

    Names missing from the result, or every name when the result is a
    failure, map to themselves.
    """
    known = result.mapping if result is not None and result.ok else {}
    return {name: known.get(name, name) for name in names}


class ReconciliationEngine:
    """Build comparison matrices from analyzed reports."""

    def __init__(
        self,
        normalizer: Optional[NameNormalizer] = None,
        merge_same_day: bool = False,
    ):
        """
        Args:
            normalizer: Name normalizer; None means identity mapping
            merge_same_day: Group reports by parsed calendar day instead of
                raw date string
        """
        self.normalizer = normalizer
        self.merge_same_day = merge_same_day

    async def reconcile(self, reports: List[ReportSnapshot]) -> ComparisonMatrix:
        """
        Normalize names and build the comparison matrix.

        The normalizer is called once for the whole session. If it fails,
        the matrix is still built with raw names as canonical names.

        Args:
            reports: Report snapshots in session order

        Returns:
            ComparisonMatrix
        """
        names = collect_names(reports)

        result = None
        if self.normalizer is not None and names:
            result = await self.normalizer.normalize(names)
            if not result.ok:
                logger.warning(f"Using raw test names, normalization failed: {result.error}")

        mapping = resolve_mapping(names, result)
        error = result.error if result is not None else None
        return self.build_matrix(reports, mapping, normalization_error=error)

    def build_matrix(
        self,
        reports: List[ReportSnapshot],
        mapping: Dict[str, str],
        normalization_error: Optional[NormalizationError] = None,
    ) -> ComparisonMatrix:
        """Build the matrix from reports and a name mapping (pure)."""
        mapping = {**resolve_mapping(collect_names(reports), None), **mapping}

        order = self.sort_reports(reports)
        columns = self.group_columns(reports, order)
        tests = self.accumulate_tests(reports, order, mapping)

        logger.info(
            f"Reconciled {len(reports)} reports into {len(columns)} columns "
            f"and {len(tests)} canonical tests"
        )
        return ComparisonMatrix(
            reports=list(reports),
            canonical_tests=tests,
            date_columns=columns,
            mapping=mapping,
            normalization_error=normalization_error,
        )

    def sort_reports(self, reports: List[ReportSnapshot]) -> List[int]:
        """Indices of reports in date order; ties keep input order."""
        return sorted(range(len(reports)), key=lambda i: parse_report_date(reports[i].date))

    def group_columns(self, reports: List[ReportSnapshot], order: List[int]) -> List[DateColumn]:
        """Group sorted reports into date columns.

        Reports with the same raw date string share a column (or the same
        calendar day when merge_same_day is set). Undated reports each get
        their own column.
        """
        columns: List[DateColumn] = []
        by_key: Dict[Tuple, DateColumn] = {}

        for position, index in enumerate(order):
            report = reports[index]
            raw = report.date.strip() if report.date else None
            key = self._group_key(raw, position)

            column = by_key.get(key)
            if column is None:
                column = DateColumn(
                    label=raw or f"Report {position + 1}",
                    raw_date=raw,
                    resolved_date=parse_report_date(raw),
                )
                by_key[key] = column
                columns.append(column)

            column.member_report_indices.append(index)
            if report.source_file_name:
                column.file_names.append(report.source_file_name)

        columns.sort(key=lambda c: c.resolved_date)
        return columns

    def _group_key(self, raw: Optional[str], position: int) -> Tuple:
        if raw is None:
            return ("undated", position)
        if self.merge_same_day:
            day = calendar_key(raw)
            if day is not None:
                return ("day", day)
        return ("raw", raw)

    def accumulate_tests(
        self,
        reports: List[ReportSnapshot],
        order: List[int],
        mapping: Dict[str, str],
    ) -> List[CanonicalTest]:
        """Canonical tests in first-seen order across date-sorted reports."""
        table: Dict[str, CanonicalTest] = {}

        for index in order:
            for test in reports[index].tests:
                canonical = mapping.get(test.name, test.name)
                entry = table.get(canonical)
                if entry is None:
                    entry = CanonicalTest(
                        canonical_name=canonical,
                        category=test.category,
                        unit=test.unit,
                        reference_range=test.reference_range,
                    )
                    table[canonical] = entry
                entry.add_name(test.name)

        return list(table.values())
