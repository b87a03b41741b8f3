"""
HTML Report Generator - self-contained HTML for print and PDF export.

Comparison documents are split into clinical sections (see
core/builders/sections.py); each non-empty section gets its own table with
one column per report date. Output is ready for Gotenberg PDF conversion.
"""
import html as html_lib
import logging
from collections import OrderedDict
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from app.config.limits import ABSENT_MARKER
from app.core.builders.abbreviations import format_test_name_with_abbreviation
from app.core.builders.sections import DEFAULT_SECTIONS, SectionSpec, partition_tests
from app.core.models.comparison import CanonicalTest, ComparisonMatrix, Trend
from app.core.models.report import PatientInfo, ReportSnapshot
from app.adapters.export import styles

logger = logging.getLogger(__name__)

COMPARISON_TITLE = "Полный сводный отчет с референсными значениями"
REPORT_TITLE = "Анализ крови"
DISCLAIMER = (
    "Этот отчет предназначен только для информационных целей. "
    "Пожалуйста, проконсультируйтесь с врачом."
)
PRINT_BUTTON = '<button class="print-button" onclick="window.print()">Печать</button>'


def escape(text) -> str:
    """Escape HTML special characters."""
    if text is None or text == "":
        return ""
    return html_lib.escape(str(text))


def format_patient_line(patient: Optional[PatientInfo]) -> str:
    """`Name, 42 лет, М` style summary of the patient header."""
    if patient is None:
        return "Пациент: Не указано"

    line = f"Пациент: {patient.name or 'Не указано'}"
    if patient.age:
        line += f", {patient.age} лет"
    gender = {"male": "М", "female": "Ж"}.get((patient.gender or "").lower())
    if gender:
        line += f", {gender}"
    return line


def format_period(labels: Sequence[str]) -> str:
    """First and last column labels joined by a dash (or the only one)."""
    labels = [label for label in labels if label]
    if len(labels) >= 2:
        return f"{labels[0]} — {labels[-1]}"
    return labels[0] if labels else ""


def _render_cell(matrix: ComparisonMatrix, test: CanonicalTest, idx: int) -> str:
    observation = matrix.lookup(test.canonical_name, idx)
    if observation is None:
        return f'<td class="status-missing">{ABSENT_MARKER}</td>'

    status_class = f"status-{observation.status.value.lower()}"
    value = escape(observation.value)
    trend = matrix.trend(test.canonical_name, idx)
    arrow = f'<span class="trend">{trend.arrow}</span>' if trend is not Trend.NONE else ""
    return f'<td class="{status_class}">{value}{arrow}</td>'


def render_section_table(
    matrix: ComparisonMatrix,
    title: str,
    tests: List[CanonicalTest],
) -> str:
    """One section header plus its table."""
    lines = [f'<div class="section-header">{escape(title)}</div>', "<table>", "<thead><tr>"]
    lines.append("<th>Показатель</th>")
    for column in matrix.date_columns:
        lines.append(f"<th>{escape(column.label)}</th>")
    lines.append("<th>Норма (Референс)</th>")
    lines.append("</tr></thead>")
    lines.append("<tbody>")

    for test in tests:
        name = escape(format_test_name_with_abbreviation(test.canonical_name))
        if test.alternative_names:
            name += f'<span class="alt-names">{escape(", ".join(test.alternative_names))}</span>'
        lines.append("<tr>")
        lines.append(f"<td>{name}</td>")
        for idx in range(len(matrix.date_columns)):
            lines.append(_render_cell(matrix, test, idx))
        lines.append(f"<td>{escape(test.reference_range) or ABSENT_MARKER}</td>")
        lines.append("</tr>")

    lines.append("</tbody>")
    lines.append("</table>")
    return "\n".join(lines)


def render_comparison_html(
    matrix: ComparisonMatrix,
    sections: Sequence[SectionSpec] = DEFAULT_SECTIONS,
    categories: Optional[Iterable[str]] = None,
    title: str = COMPARISON_TITLE,
) -> str:
    """
    Render the comparison matrix as a printable HTML document.

    Args:
        matrix: Comparison matrix
        sections: Ordered sections; the last one catches unmatched tests
        categories: Category selection (None or empty keeps all tests)
        title: Document heading

    Returns:
        Complete HTML document with inline CSS and a print button
    """
    tests = matrix.filter_by_categories(categories)
    grouped = partition_tests(tests, sections)

    body_parts = [
        PRINT_BUTTON,
        '<div class="header">',
        f"<h1>{escape(title)}</h1>",
    ]
    patient_line = format_patient_line(matrix.first_patient)
    period = format_period([c.label for c in matrix.date_columns])
    if period:
        patient_line += f" | {period}"
    body_parts.append(f'<div class="patient-info">{escape(patient_line)}</div>')
    body_parts.append("</div>")

    rendered = 0
    for section_title, section_tests in grouped.items():
        if not section_tests:
            continue
        body_parts.append(render_section_table(matrix, section_title, section_tests))
        rendered += 1

    logger.info(f"Rendered comparison HTML: {len(tests)} tests in {rendered} sections")
    return _document(title, styles.get_comparison_css(), "\n".join(body_parts))


def render_report_html(report: ReportSnapshot, title: str = REPORT_TITLE) -> str:
    """Render a single report as a printable HTML document."""
    summary = report.summary()

    by_category: "OrderedDict[str, list]" = OrderedDict()
    for test in report.tests:
        by_category.setdefault(test.category or "Другое", []).append(test)

    body_parts = [
        PRINT_BUTTON,
        '<div class="header">',
        f"<h1>{escape(title)}</h1>",
        f"<p>Сгенерировано BloodParser {datetime.now().strftime('%d.%m.%Y')}</p>",
        "</div>",
    ]

    if report.patient_info:
        line = format_patient_line(report.patient_info)
        if report.date:
            line += f" | {report.date}"
        body_parts.append(f'<div class="patient">{escape(line)}</div>')

    body_parts.append('<div class="summary">')
    for css_class, key, label in (
        ("total", "total", "Всего анализов"),
        ("normal", "normal", "Норма"),
        ("abnormal", "abnormal", "Внимание"),
    ):
        body_parts.append(
            f'<div class="summary-box {css_class}">'
            f'<div class="value">{summary[key]}</div>'
            f'<div class="label">{label}</div></div>'
        )
    body_parts.append("</div>")

    for category, tests in by_category.items():
        body_parts.append('<div class="category">')
        body_parts.append(f'<div class="category-header">{escape(category)}</div>')
        body_parts.append("<table><thead><tr>")
        body_parts.append(
            "<th>Название анализа</th><th>Значение</th><th>Ед. изм.</th>"
            "<th>Норма</th><th>Статус</th>"
        )
        body_parts.append("</tr></thead><tbody>")
        for test in tests:
            status = test.status.value
            body_parts.append(
                "<tr>"
                f"<td>{escape(format_test_name_with_abbreviation(test.name))}</td>"
                f"<td><strong>{escape(test.value)}</strong></td>"
                f"<td>{escape(test.unit) or '-'}</td>"
                f"<td>{escape(test.reference_range) or '-'}</td>"
                f'<td><span class="status {status}">{status}</span></td>'
                "</tr>"
            )
        body_parts.append("</tbody></table></div>")

    body_parts.append(
        f'<div class="footer"><p>{DISCLAIMER}</p>'
        '<p style="margin-top: 4px;">Сгенерировано BloodParser</p></div>'
    )
    return _document(title, styles.get_report_css(), "\n".join(body_parts))


def _document(title: str, css: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="ru">
<head>
    <meta charset="UTF-8">
    <title>{escape(title)}</title>
    <style>
{css}
    </style>
</head>
<body>
{body}
</body>
</html>"""
