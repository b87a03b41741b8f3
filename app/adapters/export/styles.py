"""
CSS styles for document export.

Inline stylesheets for the comparison and single-report HTML documents.
Both are rendered to PDF by headless Chromium, so print rules matter.
"""

ACCENT_COLOR = "#2E86AB"
REPORT_ACCENT = "#8B3A4A"
ABNORMAL_COLOR = "#dc2626"


def get_base_css(font_size: str = "11px") -> str:
    """Reset and body typography shared by all exports."""
    return f"""
    * {{ margin: 0; padding: 0; box-sizing: border-box; }}
    body {{
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
        background: white;
        color: #000000;
        line-height: 1.4;
        padding: 40px;
        font-size: {font_size};
    }}
    """


def get_print_css() -> str:
    """Print button and @media print rules."""
    return """
    .print-button {
        position: fixed;
        top: 16px;
        right: 16px;
        padding: 8px 16px;
        background: #2E86AB;
        color: white;
        border: none;
        border-radius: 4px;
        font-size: 13px;
        cursor: pointer;
    }
    @page { size: A4; margin: 10mm; }
    @media print {
        body { padding: 0; }
        .print-button { display: none; }
        tr { page-break-inside: avoid; }
        .section-header { page-break-after: avoid; }
    }
    """


def get_comparison_css() -> str:
    """Styles for the multi-date comparison table."""
    return get_base_css() + f"""
    .header {{
        text-align: center;
        margin-bottom: 30px;
    }}
    .header h1 {{
        font-size: 26px;
        font-weight: 600;
        color: {ACCENT_COLOR};
        margin-bottom: 10px;
        text-transform: uppercase;
        letter-spacing: 0.5px;
    }}
    .header .patient-info {{
        font-size: 14px;
        color: #555;
    }}
    .section-header {{
        background: linear-gradient(to right, #f8f9fa, #e9ecef);
        border-left: 4px solid {ACCENT_COLOR};
        padding: 10px 15px;
        margin: 20px 0 10px 0;
        font-weight: 600;
        font-size: 14px;
        color: #333;
    }}
    table {{
        width: 100%;
        border-collapse: collapse;
        margin-bottom: 15px;
    }}
    th {{
        background-color: #f1f3f4;
        color: #333;
        padding: 8px 6px;
        text-align: center;
        font-weight: 600;
        font-size: 10px;
        border: 1px solid #ccc;
        border-bottom: 2px solid #999;
    }}
    th:first-child {{ text-align: left; width: 30%; }}
    th:last-child {{ width: 18%; font-style: italic; }}
    td {{
        padding: 6px;
        border: 1px solid #ddd;
        vertical-align: middle;
        text-align: center;
        height: 26px;
    }}
    td:first-child {{ text-align: left; padding-left: 10px; font-weight: 500; }}
    td:last-child {{ font-size: 10px; color: #555; font-style: italic; }}
    .status-normal {{ color: #000000; font-weight: 400; }}
    .status-high, .status-low {{ color: {ABNORMAL_COLOR}; font-weight: 600; }}
    .status-missing {{ color: #999; }}
    .trend {{ font-size: 9px; color: #666; margin-left: 3px; }}
    .alt-names {{ display: block; font-size: 9px; color: #888; font-weight: 400; }}
    """ + get_print_css()


def get_report_css() -> str:
    """Styles for the single-report print view."""
    return get_base_css("12px") + f"""
    body {{ color: #333; }}
    .header {{
        background: linear-gradient(135deg, {REPORT_ACCENT}, #C9756C);
        color: white;
        padding: 24px;
        margin: -40px -40px 24px;
    }}
    .header h1 {{ font-size: 24px; margin-bottom: 4px; }}
    .header p {{ font-size: 12px; opacity: 0.9; }}
    .patient {{ margin-bottom: 16px; color: #555; }}
    .summary {{ display: flex; gap: 16px; margin-bottom: 24px; }}
    .summary-box {{ flex: 1; padding: 16px; border-radius: 8px; text-align: center; }}
    .summary-box.total {{ background: #f5f5f5; }}
    .summary-box.normal {{ background: #dcfce7; color: #166534; }}
    .summary-box.abnormal {{ background: #fee2e2; color: #991b1b; }}
    .summary-box .value {{ font-size: 28px; font-weight: bold; }}
    .summary-box .label {{ font-size: 12px; opacity: 0.8; }}
    .category {{ margin-bottom: 24px; }}
    .category-header {{
        background: #f8f8f8;
        padding: 8px 12px;
        font-weight: 600;
        color: {REPORT_ACCENT};
        margin-bottom: 8px;
        border-radius: 4px;
    }}
    table {{ width: 100%; border-collapse: collapse; }}
    th {{ background: #f5f5f5; padding: 8px; text-align: left; font-weight: 600; color: #666; }}
    td {{ padding: 8px; border-bottom: 1px solid #eee; }}
    tr:nth-child(even) {{ background: #fafafa; }}
    .status {{ font-weight: 600; padding: 2px 8px; border-radius: 4px; }}
    .status.Normal {{ color: #166534; background: #dcfce7; }}
    .status.High {{ color: #991b1b; background: #fee2e2; }}
    .status.Low {{ color: #92400e; background: #fef3c7; }}
    .footer {{
        margin-top: 32px;
        padding-top: 16px;
        border-top: 1px solid #eee;
        font-size: 10px;
        color: #666;
        text-align: center;
    }}
    """ + get_print_css()
