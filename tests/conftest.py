"""
Pytest configuration and shared fixtures for testing.
"""

import os

import pytest

from clinote.core.config import ClinoteSettings
from clinote.pipeline import ClinotePipeline


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep CLINOTE_* variables and any .env file out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("CLINOTE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return ClinoteSettings(_env_file=None)


@pytest.fixture
def heuristic_settings():
    return ClinoteSettings(_env_file=None, enable_fallback_heuristics=True)


@pytest.fixture
def pipeline(settings):
    return ClinotePipeline(settings)


@pytest.fixture
def soap_note_text():
    """Complete SOAP note"""
    return (
        "Subjective: Patient reports sore throat for two days.\n"
        "Objective: Temp 38.2 C. Tonsillar exudate.\n"
        "Assessment: Streptococcal pharyngitis.\n"
        "Plan: Amoxicillin for 10 days. Return if not improving.\n"
    )


@pytest.fixture
def hp_note_text():
    """H&P note with multi-line sections and markdown-style headings"""
    return """Chief Complaint: Chest pain.

## HPI:
Pain began two days ago.
Worse with exertion.

PMH: Hypertension.
Medications: Lisinopril 10 mg daily.
Allergies: NKDA.
**Physical Exam:** Lungs clear.
Assessment: Atypical chest pain.
Plan:
Serial troponins.
Follow up with cardiology.
"""


@pytest.fixture
def discharge_note_text():
    return (
        "Admission Diagnosis: Community-acquired pneumonia.\n"
        "Hospital Course: Treated with IV antibiotics.\n"
        "Discharge Diagnosis: Pneumonia, resolving.\n"
        "Follow-Up: PCP in one week.\n"
    )


@pytest.fixture
def soap_bundle_text(soap_note_text):
    """Three SOAP notes separated by delimiter lines"""
    second = soap_note_text.replace("sore throat", "ear pain")
    third = soap_note_text.replace("sore throat", "cough")
    return f"{soap_note_text}\n---\n{second}\n-----\n{third}"
