"""
Misclassification reports
Appends the user's corrections of wrong classifications to a JSONL log so
they can be fed back into the classifier later
"""

import json
import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

MIN_LABEL_LENGTH = 2


@dataclass
class MisclassificationReport:
    """User correction of one classification"""
    incorrect_classification: str
    correct_classification: str
    image_ref: str
    user_notes: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["datetime"] = datetime.fromtimestamp(self.timestamp).isoformat()
        return data


class ReportLog:
    """
    Handles logging of misclassification reports to a JSONL file
    """

    def __init__(self, log_dir: str = "logs"):
        """
        Initialize report log

        Args:
            log_dir: Directory for the report file
        """
        self.log_dir = Path(log_dir)
        self.report_file = self.log_dir / "feedback_reports.jsonl"
        self.lock = threading.Lock()
        self.setup_logging()

    def setup_logging(self):
        """Setup logging"""
        self.logger = logging.getLogger(__name__)

    def submit(self, report: MisclassificationReport) -> Dict:
        """
        Record a misclassification report

        Args:
            report: Report to append

        Returns:
            Dictionary with success flag and a message for the user

        Raises:
            ValueError: if the corrected label is too short
        """
        label = report.correct_classification.strip()
        if len(label) < MIN_LABEL_LENGTH:
            raise ValueError("Please enter a valid classification.")

        with self.lock:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with open(self.report_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(report.to_dict()) + '\n')

        self.logger.info(
            f"Logged misclassification: {report.incorrect_classification} -> {label}"
        )
        return {
            "success": True,
            "message": "Thank you for helping to improve recognition. "
                       "Your feedback has been submitted.",
        }

    def recent_reports(self, count: int = 10) -> List[Dict]:
        """
        Get the most recent reports, oldest first

        Lines that are not valid JSON are skipped.
        """
        if not self.report_file.exists():
            return []

        reports = []
        with open(self.report_file, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    reports.append(json.loads(line))
                except json.JSONDecodeError:
                    self.logger.warning("Skipping unreadable report line")

        return reports[-count:] if count > 0 else []
