"""Prompt templates for report extraction, name normalization and chat."""
from typing import Iterable

EXTRACTION_PROMPT = """
You are a specialized medical data extraction AI analyzing a blood report. Extract ALL blood test parameters AND patient information.

IMPORTANT: Return all test names and categories in RUSSIAN language.

Extract in this exact JSON format:
{
  "patient_info": {
    "name": "Patient Name or null if not found",
    "age": "Age in years or null if not found",
    "gender": "Male/Female or null if not found",
    "date": "Test date in format DD.MM.YYYY or null if not found"
  },
  "tests": [
    {
      "test_name": "Гемоглобин",
      "value": "12.5",
      "unit": "г/дл",
      "normal_range": "12.0-15.0",
      "status": "Normal",
      "category": "Общий анализ крови"
    }
  ]
}

RULES:
1. "status" must be exactly "Normal", "High", or "Low" based on reference range comparison
2. "category" should be one of these RUSSIAN categories: "Общий анализ крови", "Лейкоцитарная формула", "Метаболическая панель", "Липидный профиль", "Функция печени", "Функция почек", "Функция щитовидной железы", "Витамины и минералы", "Коагулограмма", or "Другое"
3. "value" should be the numeric value as a string
4. "normal_range" should be in format "min-max" (e.g., "12.0-15.0")
5. "test_name" must be in RUSSIAN language (e.g., "Глюкоза", "Креатинин", "Тестостерон")
6. "unit" should be in standard format (keep units as they appear: г/дл, ммоль/л, Ед/л, etc.)
7. Extract patient_info from the report header: look for name, age/возраст, gender/пол, date/дата исследования
   - For DATE: look for "Дата:", "Date:", "Дата исследования:", "Дата взятия:", "Дата анализа:" or similar. Convert any date format to DD.MM.YYYY.
   - If the date is written with a month name ("06 февраля 2026", "06 фев 2026"), convert the month to its number and return "06.02.2026"
8. If any patient_info field is not found in the report, use null for that field

EXTRACT every medical test parameter present AND all available patient information.
Return ONLY valid JSON, no markdown or explanation.
TRANSLATE all test names to Russian before returning.
"""

OCR_EXTRACTION_SUFFIX = """
Here is the OCR text content of the blood test report between the markers. Note: the content may include HTML tags (like <table>, <div>, etc.) for layout formatting - extract the actual test data from these structures.

<REPORT>
{report}
</REPORT>
"""

NORMALIZATION_PROMPT = """Посмотри на список параметров крови ниже.

Задача: найди разные наименования для одних и тех же параметров и собери их вместе под одним общим названием.

{names}

Важно:
- Если параметры отличаются только аббревиатурой в скобках - это один и тот же параметр
- Используй русские названия для canonical name
- Все варианты одного параметра должны иметь ОДИНАКОВОЕ canonical name
- Каждое название из списка должно присутствовать в ответе как ключ

Верни результат в формате JSON:
{{
  "mappings": {{
    "оригинальное_название_1": "Общее название",
    "оригинальное_название_2": "Общее название"
  }}
}}"""

CHAT_PROMPT = """
You are a medical assistant helping interpret blood test results. Answer based ONLY on the test data provided in the context.

{context}

USER QUESTION: {message}

GUIDELINES:
1. Only discuss tests that appear in the context above
2. For abnormal values, explain what they might indicate without making definitive diagnoses
3. If asked about a test that isn't in the data, clearly state that information is not available
4. Use simple, patient-friendly language
5. Include relevant reference ranges when discussing specific tests
6. Always recommend consulting a healthcare professional for medical advice
7. Be concise but thorough

YOUR ANSWER:
"""

NO_CONTEXT = "No specific test data provided."


def build_ocr_extraction_prompt(ocr_markdown: str) -> str:
    return EXTRACTION_PROMPT + OCR_EXTRACTION_SUFFIX.format(report=ocr_markdown)


def build_normalization_prompt(names: Iterable[str]) -> str:
    numbered = "\n".join(f"{idx}. {name}" for idx, name in enumerate(names, start=1))
    return NORMALIZATION_PROMPT.format(names=numbered)


def build_chat_prompt(message: str, context: str) -> str:
    return CHAT_PROMPT.format(context=context or NO_CONTEXT, message=message)
