"""
Validation report generation for tikzsketch.

Writes JSON and plain-text summaries of the validation results.
"""

import os

from tikzsketch.io.save_artifacts import save_json, save_text
from tikzsketch.tracer import get_tracer, trace


def summarize_report(report):
    """Human-readable summary lines of a ValidationReport."""
    passed = [c for c in report.checks if c.passed]
    failed = [c for c in report.checks if not c.passed]

    lines = ["tikzsketch Validation Report", "=" * 40, ""]
    lines.append(f"Total checks: {len(report.checks)}")
    lines.append(f"Passed: {len(passed)}")
    lines.append(f"Failed: {len(failed)}")
    lines.append("")

    if failed:
        lines.append("ISSUES:")
        lines.append("-" * 40)
        for check in failed:
            lines.append(f"[{check.severity.value.upper()}] {check.rule_id}: {check.message}")
        lines.append("")

    lines.append("ALL CHECKS:")
    lines.append("-" * 40)
    for check in report.checks:
        lines.append(format_check_result(check))

    return lines


@trace(label="generate_report")
def generate_report(report, out_dir):
    """
    Generate validation report files.

    Creates:
    - validation_report.json: Full check results
    - validation_summary.txt: Human-readable summary

    Returns (report_path, summary_path).
    """
    tracer = get_tracer()

    report_path = os.path.join(out_dir, "validation_report.json")
    save_json(report.model_dump(mode="json"), report_path)

    summary_path = os.path.join(out_dir, "validation_summary.txt")
    save_text("\n".join(summarize_report(report)), summary_path)

    tracer.event(f"Report saved: {len(report.checks)} checks, {report.error_count} errors")

    return report_path, summary_path


def format_check_result(check):
    """Format a single check result for display."""
    status = "PASS" if check.passed else "FAIL"
    severity = check.severity.value.upper()
    return f"[{status}][{severity}] {check.rule_id}: {check.message}"
