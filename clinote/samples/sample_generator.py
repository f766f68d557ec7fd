"""
Sample Generator - Deterministic Fixture Notes

Writes synthetic, de-identified clinical notes for trying out the parser and
for batch smoke tests. Output depends only on the arguments: the same seed
always produces byte-identical files.

Output layout:
    out_dir/sample_001.txt ...   → one note each
    out_dir/bundle_001.txt ...   → 2-4 notes each, separated by "---" lines
"""

import random
from pathlib import Path
from typing import Dict, List, Optional, Union

from loguru import logger

from clinote.core.constants import BUNDLE_JOIN_DELIMITER
from clinote.core.enums import NoteFormat
from clinote.utils.file_operations import ensure_directory, write_text


# =============================================================================
# STAGE 1: CONTENT POOLS
# =============================================================================
# Section label → interchangeable sentences. Labels follow the section
# vocabulary so generated notes parse without warnings.

CONTENT_POOLS: Dict[NoteFormat, Dict[str, List[str]]] = {
    NoteFormat.SOAP: {
        "Subjective": [
            "Patient reports intermittent headache for three days.",
            "Patient complains of productive cough and mild fatigue.",
            "Patient states knee pain is worse after walking.",
        ],
        "Objective": [
            "BP 128/82, HR 76, afebrile. Lungs clear to auscultation.",
            "Temp 38.1 C, HR 92. Mild pharyngeal erythema.",
            "Right knee with mild effusion, full range of motion.",
        ],
        "Assessment": [
            "Tension-type headache.",
            "Acute bronchitis, likely viral.",
            "Osteoarthritis of the right knee.",
        ],
        "Plan": [
            "Rest, fluids and ibuprofen as needed. Return if symptoms worsen.",
            "Supportive care. Follow up in one week.",
            "Start physical therapy. Continue acetaminophen.",
        ],
    },
    NoteFormat.HP: {
        "Chief Complaint": ["Chest pain.", "Shortness of breath.", "Abdominal pain."],
        "History of Present Illness": [
            "Pain began two days ago and is worse with exertion.",
            "Symptoms started last night and have been worsening.",
            "Intermittent pain for one week, no fever.",
        ],
        "Past Medical History": ["Hypertension.", "Type 2 diabetes.", "Asthma."],
        "Medications": ["Lisinopril 10 mg daily.", "Metformin 500 mg BID.", "Albuterol PRN."],
        "Allergies": ["NKDA.", "Penicillin (rash).", "Sulfa drugs."],
        "Physical Exam": [
            "Vitals stable. Lungs clear. Heart regular rate and rhythm.",
            "Mild epigastric tenderness, no rebound.",
            "Scattered wheezes bilaterally.",
        ],
        "Assessment": ["Atypical chest pain.", "Asthma exacerbation.", "Gastritis."],
        "Plan": [
            "Serial troponins and ECG. Follow up with cardiology.",
            "Nebulizer treatments and oral steroids.",
            "Start omeprazole. Return if pain worsens.",
        ],
    },
    NoteFormat.DISCHARGE: {
        "Admission Diagnosis": ["Community-acquired pneumonia.", "Cellulitis of left leg.", "CHF exacerbation."],
        "Discharge Diagnosis": ["Pneumonia, resolving.", "Cellulitis, improved.", "CHF, compensated."],
        "Hospital Course": [
            "Treated with IV antibiotics, transitioned to oral on day 3.",
            "Received IV cefazolin with steady improvement of erythema.",
            "Diuresed with IV furosemide, weight down 3 kg.",
        ],
        "Discharge Medications": ["Amoxicillin 875 mg BID x5 days.", "Cephalexin 500 mg QID.", "Furosemide 40 mg daily."],
        "Follow-Up": ["PCP in one week.", "Wound clinic in 10 days.", "Cardiology in two weeks."],
    },
}


# =============================================================================
# STAGE 2: NOTE BUILDING
# =============================================================================


def build_note(note_format: NoteFormat, rng: random.Random) -> str:
    """Build one note with every section of the format, in canonical order."""
    pools = CONTENT_POOLS[NoteFormat.from_string(note_format)]
    return "\n".join(f"{label}: {rng.choice(options)}" for label, options in pools.items())


def build_bundle(note_format: NoteFormat, rng: random.Random, size: int) -> str:
    separator = f"\n{BUNDLE_JOIN_DELIMITER}\n"
    return separator.join(build_note(note_format, rng) for _ in range(size)) + "\n"


# =============================================================================
# STAGE 3: FILE GENERATION
# =============================================================================


def generate_samples(
    out_dir: Union[str, Path],
    count: int,
    bundles: int = 0,
    note_format: Optional[NoteFormat] = None,
    seed: int = 42,
) -> List[Path]:
    """
    Write sample note files.

    Step 1: Validate counts and create the output directory
    Step 2: Write `count` single-note files (formats cycle unless one is given)
    Step 3: Write `bundles` bundle files with 2-4 notes each
    Step 4: Return the written paths in order

    Raises:
        ValueError: If count or bundles is negative
        OutputWriteError: If the directory or a file cannot be written
    """
    if count < 0 or bundles < 0:
        raise ValueError(f"count and bundles must be non-negative, got {count} and {bundles}")

    directory = ensure_directory(out_dir)
    rng = random.Random(seed)
    formats = [NoteFormat.from_string(note_format)] if note_format else list(NoteFormat)
    written: List[Path] = []

    for i in range(count):
        fmt = formats[i % len(formats)]
        written.append(write_text(directory / f"sample_{i + 1:03d}.txt", build_note(fmt, rng) + "\n"))

    for i in range(bundles):
        fmt = formats[i % len(formats)]
        written.append(write_text(directory / f"bundle_{i + 1:03d}.txt", build_bundle(fmt, rng, rng.randint(2, 4))))

    logger.info(f"Generated {count} sample note(s) and {bundles} bundle(s) in {directory}")
    return written
