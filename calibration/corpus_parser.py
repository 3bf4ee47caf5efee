"""
Corpus Parser — Reads Labelled Gate Samples

Parses the simple text format used for calibration corpus files.
Each sample is a query preceded by metadata tags, separated by
'---' delimiters.

Format:
    ---
    expect: reject
    reason: keyboard_mashing
    source: support inbox, week 12
    notes: Classic home-row smash

    asdfgh jkl asdfgh

    ---

``expect`` is ``pass`` or ``reject`` (default ``pass``). ``reason`` is
optional and names the gibberish check expected to fire first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


EXPECTATIONS = ("pass", "reject")


@dataclass
class CalibrationSample:
    """A single labelled query from the calibration corpus."""
    text: str
    expect: str                   # pass | reject
    reason: Optional[str]         # Expected gibberish reason, if labelled
    source: str
    notes: str

    # Populated after engine evaluation
    engine_result: Optional[dict] = None

    @property
    def expects_reject(self) -> bool:
        return self.expect == "reject"


def parse_corpus(filepath: str | Path) -> list[CalibrationSample]:
    """
    Parse a calibration corpus file into a list of samples.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a block carries an unknown ``expect`` label.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    content = filepath.read_text(encoding="utf-8")

    blocks = re.split(r"(?:^|\n)\s*---\s*(?:\n|$)", content)

    samples = []
    for block in blocks:
        block = block.strip()
        if not block:
            continue

        sample = _parse_block(block)
        if sample:
            samples.append(sample)

    return samples


def _parse_block(block: str) -> Optional[CalibrationSample]:
    """Parse a single sample block."""
    metadata = {}
    text_lines = []
    in_text = False

    for line in block.split("\n"):
        stripped = line.strip()
        if stripped.startswith("#"):
            continue

        if not in_text:
            match = re.match(r"^(expect|reason|source|notes)\s*:\s*(.+)$", stripped, re.IGNORECASE)
            if match:
                metadata[match.group(1).lower()] = match.group(2).strip()
            elif stripped:
                in_text = True
                text_lines.append(line)
        else:
            text_lines.append(line)

    text = "\n".join(text_lines).strip()
    if not text:
        return None

    expect = metadata.get("expect", "pass").lower()
    if expect not in EXPECTATIONS:
        raise ValueError(f"Unknown expectation {expect!r} (use one of {', '.join(EXPECTATIONS)})")

    reason = metadata.get("reason")
    return CalibrationSample(
        text=text,
        expect=expect,
        reason=reason.lower() if reason else None,
        source=metadata.get("source", "unknown"),
        notes=metadata.get("notes", ""),
    )


def parse_all_corpora(corpus_dir: str | Path) -> list[CalibrationSample]:
    """Parse all .txt corpus files in a directory."""
    corpus_dir = Path(corpus_dir)
    samples = []
    for filepath in sorted(corpus_dir.glob("*.txt")):
        samples.extend(parse_corpus(filepath))
    return samples
