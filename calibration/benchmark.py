"""
Benchmark Runner — Gate Decision Precision/Recall/F1

Runs the calibration corpus through the scorer and compares the gate
decision against human labels. "Positive" means the gate rejected the
query. Produces:

  1. Accuracy, precision, recall and F1 of the reject decision
  2. Grade distribution
  3. Mean composite score per label (and the gap between them)
  4. Agreement on the first-fired gibberish reason, where labelled
  5. False accepts and false rejects for manual review

This is the tool that tells you whether the thresholds are right.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from querygate import scorer
from querygate.scorer import GRADES, PASSING_THRESHOLD
from calibration.corpus_parser import CalibrationSample, parse_all_corpora


@dataclass
class DecisionMetrics:
    """Confusion counts for the reject decision."""
    true_positives: int = 0   # Gate rejected, human expected reject
    false_positives: int = 0  # Gate rejected, human expected pass
    false_negatives: int = 0  # Gate passed, human expected reject
    true_negatives: int = 0   # Gate passed, human expected pass

    @property
    def total(self) -> int:
        return self.true_positives + self.false_positives + self.false_negatives + self.true_negatives

    @property
    def accuracy(self) -> float:
        return (self.true_positives + self.true_negatives) / self.total if self.total > 0 else 0.0

    @property
    def precision(self) -> float:
        denom = self.true_positives + self.false_positives
        return self.true_positives / denom if denom > 0 else 0.0

    @property
    def recall(self) -> float:
        denom = self.true_positives + self.false_negatives
        return self.true_positives / denom if denom > 0 else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if (p + r) > 0 else 0.0


@dataclass
class BenchmarkResult:
    """Full benchmark output."""
    total_samples: int
    pass_samples: int
    reject_samples: int
    metrics: DecisionMetrics
    grade_distribution: dict[str, int]
    avg_score_pass: float
    avg_score_reject: float
    score_separation: float
    reason_labelled: int
    reason_matches: int
    false_accepts: list[dict] = field(default_factory=list)   # Expected reject, gate passed
    false_rejects: list[dict] = field(default_factory=list)   # Expected pass, gate rejected
    score_pairs: list[dict] = field(default_factory=list)

    @property
    def reason_accuracy(self) -> float:
        return self.reason_matches / self.reason_labelled if self.reason_labelled else 0.0


def evaluate_sample(sample: CalibrationSample) -> dict:
    """Score one sample and store the outcome on it."""
    quality = scorer.score(sample.text)
    sample.engine_result = {
        "score": quality.overall.score,
        "grade": quality.overall.grade,
        "rejected": not quality.overall.is_passing,
        "gibberish": quality.details.gibberish.is_gibberish,
        "reason": quality.details.gibberish.reason,
    }
    return sample.engine_result


def run_benchmark(
    corpus_dir: str | Path = "calibration/corpus",
    samples: list[CalibrationSample] | None = None,
) -> BenchmarkResult:
    """
    Run the full calibration benchmark.

    Args:
        corpus_dir: Directory containing corpus .txt files.
        samples: Pre-parsed samples. Skips reading ``corpus_dir`` when given.

    Raises:
        ValueError: If there are no samples to evaluate.
    """
    if samples is None:
        samples = parse_all_corpora(corpus_dir)

    if not samples:
        raise ValueError(f"No samples found in {corpus_dir}")

    metrics = DecisionMetrics()
    grades = {g: 0 for g in GRADES}
    pass_scores: list[float] = []
    reject_scores: list[float] = []
    false_accepts = []
    false_rejects = []
    score_pairs = []
    reason_labelled = reason_matches = 0

    for sample in samples:
        outcome = evaluate_sample(sample)
        rejected = outcome["rejected"]
        grades[outcome["grade"]] += 1

        detail = {
            "text": sample.text[:200],
            "source": sample.source,
            "notes": sample.notes,
            "score": outcome["score"],
            "grade": outcome["grade"],
            "reason": outcome["reason"],
        }

        if sample.expects_reject:
            reject_scores.append(outcome["score"])
            if rejected:
                metrics.true_positives += 1
            else:
                metrics.false_negatives += 1
                false_accepts.append(detail)
        else:
            pass_scores.append(outcome["score"])
            if rejected:
                metrics.false_positives += 1
                false_rejects.append(detail)
            else:
                metrics.true_negatives += 1

        if sample.reason:
            reason_labelled += 1
            if sample.reason == outcome["reason"]:
                reason_matches += 1

        score_pairs.append({
            "text": sample.text[:100],
            "expect": sample.expect,
            "score": outcome["score"],
            "grade": outcome["grade"],
        })

    avg_pass = sum(pass_scores) / len(pass_scores) if pass_scores else 0.0
    avg_reject = sum(reject_scores) / len(reject_scores) if reject_scores else 0.0

    return BenchmarkResult(
        total_samples=len(samples),
        pass_samples=len(pass_scores),
        reject_samples=len(reject_scores),
        metrics=metrics,
        grade_distribution=grades,
        avg_score_pass=round(avg_pass, 4),
        avg_score_reject=round(avg_reject, 4),
        score_separation=round(avg_pass - avg_reject, 4),
        reason_labelled=reason_labelled,
        reason_matches=reason_matches,
        false_accepts=false_accepts,
        false_rejects=false_rejects,
        score_pairs=score_pairs,
    )


def format_report(result: BenchmarkResult) -> str:
    """Format benchmark results as a human-readable report."""
    m = result.metrics
    lines = [
        "=" * 60,
        "QUERYGATE CALIBRATION REPORT",
        "=" * 60,
        "",
        f"Samples: {result.total_samples} "
        f"({result.pass_samples} pass, {result.reject_samples} reject)",
        f"Passing threshold: {PASSING_THRESHOLD}",
        "",
        "--- REJECT DECISION ---",
        f"Accuracy:  {m.accuracy:.1%}",
        f"Precision: {m.precision:.1%}",
        f"Recall:    {m.recall:.1%}",
        f"F1 Score:  {m.f1:.1%}",
        f"TP {m.true_positives}  FP {m.false_positives}  FN {m.false_negatives}  TN {m.true_negatives}",
        "",
        "--- SCORE ANALYSIS ---",
        f"Avg score (pass samples):   {result.avg_score_pass:.3f}",
        f"Avg score (reject samples): {result.avg_score_reject:.3f}",
        f"Separation gap:             {result.score_separation:.3f}",
        f"  {'✅ GOOD' if result.score_separation >= 0.25 else '⚠️  NEEDS TUNING'}"
        f" (target: ≥0.25 gap)",
        "",
        "--- GRADE DISTRIBUTION ---",
    ]

    for grade, count in result.grade_distribution.items():
        lines.append(f"{grade:<3} {count:>4}  {'#' * count}")

    if result.reason_labelled:
        lines.extend([
            "",
            f"Gibberish reason agreement: {result.reason_matches}/{result.reason_labelled} "
            f"({result.reason_accuracy:.0%})",
        ])

    if result.false_accepts:
        lines.extend(["", "--- FALSE ACCEPTS (gate passed a query labelled reject) ---"])
        for fa in result.false_accepts[:10]:
            lines.append(f"  [{fa['grade']} {fa['score']:.3f}] {fa['text'][:80]}")
            if fa.get("notes"):
                lines.append(f"    Notes: {fa['notes']}")

    if result.false_rejects:
        lines.extend(["", "--- FALSE REJECTS (gate rejected a query labelled pass) ---"])
        for fr in result.false_rejects[:10]:
            lines.append(f"  [{fr['grade']} {fr['score']:.3f} {fr['reason']}] {fr['text'][:80]}")

    lines.extend(["", "=" * 60])
    return "\n".join(lines)


def report_json(result: BenchmarkResult) -> dict:
    """Machine-readable form of the benchmark."""
    m = result.metrics
    return {
        "total_samples": result.total_samples,
        "pass_samples": result.pass_samples,
        "reject_samples": result.reject_samples,
        "decision": {
            "accuracy": round(m.accuracy, 4),
            "precision": round(m.precision, 4),
            "recall": round(m.recall, 4),
            "f1": round(m.f1, 4),
            "tp": m.true_positives,
            "fp": m.false_positives,
            "fn": m.false_negatives,
            "tn": m.true_negatives,
        },
        "scores": {
            "avg_pass": result.avg_score_pass,
            "avg_reject": result.avg_score_reject,
            "separation": result.score_separation,
        },
        "grade_distribution": result.grade_distribution,
        "reason": {
            "labelled": result.reason_labelled,
            "matches": result.reason_matches,
        },
        "false_accepts": result.false_accepts,
        "false_rejects": result.false_rejects,
        "score_pairs": result.score_pairs,
    }


def save_report(result: BenchmarkResult, output_dir: str | Path = "calibration/reports"):
    """Save benchmark results as both human-readable report and JSON."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / "calibration_report.txt"
    report_path.write_text(format_report(result), encoding="utf-8")

    json_path = output_dir / "calibration_report.json"
    json_path.write_text(json.dumps(report_json(result), indent=2), encoding="utf-8")

    return report_path, json_path
