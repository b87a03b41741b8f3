"""Tests for printable HTML documents."""
from app.adapters.export.html_renderer import (
    COMPARISON_TITLE,
    format_patient_line,
    format_period,
    render_comparison_html,
    render_report_html,
)
from app.core.builders.sections import SectionSpec, category_allowlist, match_any
from app.core.models.report import PatientInfo, ReportSnapshot, TestObservation, TestStatus
from app.core.reconciliation.engine import ReconciliationEngine


def build_matrix():
    reports = [
        ReportSnapshot(
            tests=[
                TestObservation(name="Гемоглобин", value=13.0, reference_range="12-16",
                                category="Общий анализ крови"),
                TestObservation(name="АЛТ", value=60, status=TestStatus.HIGH, category="Функция печени"),
            ],
            patient_info=PatientInfo(name="Иванова <script>", age="42", gender="female", date="01.01.2024"),
        ),
        ReportSnapshot(
            tests=[TestObservation(name="Гемоглобин", value=10.0, status=TestStatus.LOW,
                                   category="Общий анализ крови")],
            patient_info=PatientInfo(date="15.02.2024"),
        ),
    ]
    return ReconciliationEngine().build_matrix(reports, {})


class TestHeaderHelpers:
    def test_patient_line(self):
        patient = PatientInfo(name="Петров", age="50", gender="Male")
        assert format_patient_line(patient) == "Пациент: Петров, 50 лет, М"
        assert format_patient_line(None) == "Пациент: Не указано"

    def test_period(self):
        assert format_period(["01.01.2024", "15.02.2024", "01.03.2024"]) == "01.01.2024 — 01.03.2024"
        assert format_period(["01.01.2024"]) == "01.01.2024"
        assert format_period([]) == ""


class TestRenderComparisonHtml:
    def test_document_structure(self):
        html = render_comparison_html(build_matrix())

        assert html.startswith("<!DOCTYPE html>")
        assert COMPARISON_TITLE in html
        assert "window.print()" in html
        assert "@page" in html
        assert "01.01.2024 — 15.02.2024" in html

    def test_sections_and_cells(self):
        html = render_comparison_html(build_matrix())

        assert "1. Гематология (Общий анализ крови)" in html
        assert "2. Биохимия и Гормоны" in html
        assert "3. Коагулограмма" not in html
        assert "Гемоглобин (HGB, Hb)" in html
        assert 'class="status-low">10.0<span class="trend">↓</span>' in html
        assert '<td class="status-missing">—</td>' in html

    def test_patient_name_escaped(self):
        html = render_comparison_html(build_matrix())
        assert "<script>" not in html
        assert "Иванова &lt;script&gt;" in html

    def test_custom_sections(self):
        sections = [
            SectionSpec("Печень", category_allowlist("Функция печени")),
            SectionSpec("Прочее", match_any),
        ]
        html = render_comparison_html(build_matrix(), sections=sections)
        assert "Печень" in html
        assert "Прочее" in html
        assert "Гематология" not in html

    def test_category_filter(self):
        html = render_comparison_html(build_matrix(), categories=["Функция печени"])
        assert "АЛТ" in html
        assert "Гемоглобин" not in html


class TestRenderReportHtml:
    def test_single_report(self):
        report = ReportSnapshot(
            tests=[
                TestObservation(name="Глюкоза", value=6.5, unit="ммоль/л", status=TestStatus.HIGH,
                                category="Метаболическая панель"),
                TestObservation(name="Маркер", value="отр."),
            ],
            patient_info=PatientInfo(name="Петров", date="01.02.2024"),
        )
        html = render_report_html(report)

        assert "Пациент: Петров | 01.02.2024" in html
        assert "Метаболическая панель" in html
        assert "Другое" in html
        assert "Глюкоза (GLU)" in html
        assert '<span class="status High">High</span>' in html
        assert "проконсультируйтесь с врачом" in html
