"""
Tests for the misclassification report log
"""

import json

import pytest

from recycling.utils.report_log import MisclassificationReport, ReportLog


def make_report(correct="Glass Bottle", timestamp=1_700_000_000.0):
    return MisclassificationReport(
        incorrect_classification="PET Bottle",
        correct_classification=correct,
        image_ref="data:image/jpeg;base64,AAAA",
        user_notes="Heavy and rigid",
        timestamp=timestamp,
    )


def test_submit_appends_json_line(tmp_path):
    log = ReportLog(str(tmp_path / "logs"))

    result = log.submit(make_report())

    assert result["success"] is True
    assert result["message"]
    lines = log.report_file.read_text().splitlines()
    assert len(lines) == 1
    entry = json.loads(lines[0])
    assert entry["incorrect_classification"] == "PET Bottle"
    assert entry["correct_classification"] == "Glass Bottle"
    assert entry["user_notes"] == "Heavy and rigid"
    assert "datetime" in entry


@pytest.mark.parametrize("label", ["", " ", "x", " y "])
def test_short_label_rejected(tmp_path, label):
    log = ReportLog(str(tmp_path))
    with pytest.raises(ValueError):
        log.submit(make_report(correct=label))
    assert not log.report_file.exists()


def test_recent_reports(tmp_path):
    log = ReportLog(str(tmp_path))
    assert log.recent_reports() == []

    for i in range(4):
        log.submit(make_report(timestamp=float(i)))
    with open(log.report_file, 'a') as f:
        f.write("{broken\n")

    recent = log.recent_reports(count=2)
    assert [r["timestamp"] for r in recent] == [2.0, 3.0]
    assert len(log.recent_reports()) == 4
