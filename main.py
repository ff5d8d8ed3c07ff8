#!/usr/bin/env python3
"""
Recycling-Wise - Command Line Application

This script wires the components together:
- Image encoding for scanned photos
- Rule lookup for the classified item
- Scan history with weights and feedback
- Impact statistics
- JSON persistence

Usage:
    python main.py [--config config.json] [--debug] <command> [args]

Commands:
    scan IMAGE --label LABEL     add a classified photo to history
    history                      list scan history, newest first
    show ID                      open a past scan
    weight ID GRAMS              record the weight of a scan
    feedback correct|incorrect   confirm or reject a classification
    stats                        impact dashboard
    rules                        list known items and their disposal rules
    clear                        clear history and all counters
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from recycling.config import load_config
from recycling.models.classification import ClassificationError, StaticClassifier
from recycling.models.rules import DEFAULT_RULES
from recycling.models.scan_record import ScanRecord, parse_weight_grams
from recycling.session import RecyclingSession
from recycling.utils.feedback_tracker import format_accuracy
from recycling.utils.image_ref import encode_image_file
from recycling.utils.impact import monthly_breakdown
from recycling.utils.report_log import MisclassificationReport, ReportLog
from recycling.utils.state_store import JsonFileStore, StatePersistence


class RecyclingApp:
    """
    Command line front end for a recycling session
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the application

        Args:
            config: Configuration dictionary
        """
        self.config = config
        self.setup_logging()

        storage_config = config.get('storage', {})
        history_config = config.get('history', {})
        impact_config = config.get('impact', {})
        reports_config = config.get('reports', {})

        capacity = history_config.get('capacity', 50)
        default_weight = impact_config.get('default_item_weight_kg', 0.1)

        persistence = StatePersistence(
            JsonFileStore(storage_config.get('directory', 'data')),
            key=storage_config.get('namespace', 'recycling-wise-storage'),
            capacity=capacity,
            default_weight_kg=default_weight
        )
        self.session = RecyclingSession(
            persistence,
            catalog=DEFAULT_RULES,
            capacity=capacity,
            default_weight_kg=default_weight
        )

        self.report_log = None
        if reports_config.get('enabled', True):
            self.report_log = ReportLog(reports_config.get('directory', 'logs'))

    def setup_logging(self):
        """Setup logging configuration"""
        log_level = getattr(logging, self.config.get('log_level', 'INFO'), logging.INFO)
        log_dir = Path(self.config.get('log_dir', 'logs'))
        log_dir.mkdir(parents=True, exist_ok=True)

        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=[
                logging.StreamHandler(),
                logging.FileHandler(log_dir / 'recycling_wise.log')
            ]
        )

        self.logger = logging.getLogger(__name__)

    def _warn_if_unsaved(self):
        if not self.session.last_save_ok:
            print("Warning: changes could not be saved and will be lost on exit")

    def _print_record(self, record: ScanRecord):
        when = datetime.fromtimestamp(record.timestamp).strftime('%Y-%m-%d %H:%M')
        print(f"{record.category}  [{record.rule.action.value}]  {when}")
        print(f"  id:          {record.id}")
        print(f"  preparation: {record.rule.preparation}")
        print(f"  notes:       {record.rule.notes}")
        print(f"  source:      {record.rule.source}")
        if record.weight_kg is not None:
            print(f"  weight:      {record.weight_kg * 1000:.0f}g")

    def cmd_scan(self, image: str, label: str, ideas=None) -> int:
        image_config = self.config.get('image', {})
        try:
            image_ref = encode_image_file(
                image,
                max_dimension=image_config.get('max_dimension', 512),
                jpeg_quality=image_config.get('jpeg_quality', 85)
            )
            result = StaticClassifier(label, ideas or []).classify(image_ref)
        except (ValueError, ClassificationError) as e:
            print(f"Recognition failed: {e}")
            return 1

        record = self.session.add_classification(result, image_ref)
        if record is None:
            print(f"No disposal rule for '{result.category}'.")
            print(f"Known items: {', '.join(self.session.catalog.categories)}")
            return 1

        print(f"Saved to history: \"{record.category}\"")
        self._print_record(record)
        if result.reuse_ideas:
            print("Reuse ideas:")
            for idea in result.reuse_ideas:
                print(f"  - {idea}")
        self._warn_if_unsaved()
        return 0

    def cmd_history(self) -> int:
        history = self.session.history
        if not history:
            print("No scans yet.")
            return 0

        for record in history:
            when = datetime.fromtimestamp(record.timestamp).strftime('%Y-%m-%d %H:%M')
            weight = f"{record.weight_kg * 1000:.0f}g" if record.weight_kg is not None else "-"
            print(f"{record.id:<32} {record.category:<14} {record.rule.action.value:<17} "
                  f"{when}  {weight}")
        return 0

    def cmd_show(self, record_id: str) -> int:
        record = self.session.select_from_history(record_id)
        if record is None:
            print(f"No scan with id {record_id} in history")
            return 1
        self._print_record(record)
        self._warn_if_unsaved()
        return 0

    def cmd_weight(self, record_id: str, grams: str) -> int:
        try:
            weight_kg = parse_weight_grams(grams)
        except ValueError as e:
            print(f"{e}. Please enter a valid positive number for the weight.")
            return 1

        record = self.session.find(record_id)
        if record is None:
            print(f"No scan with id {record_id} in history")
            return 1

        self.session.update_weight(record_id, weight_kg)
        print(f"Weight saved for {record.category}. "
              f"Waste diverted: {self.session.waste_diverted_kg:.2f} kg")
        self._warn_if_unsaved()
        return 0

    def cmd_feedback(self, verdict: str, record_id: Optional[str] = None,
                     correct_label: Optional[str] = None,
                     notes: Optional[str] = None) -> int:
        record = self.session.find(record_id) if record_id else self.session.active_item
        if record_id and record is None:
            print(f"No scan with id {record_id} in history")
            return 1

        if verdict == 'correct':
            self.session.record_correct()
        else:
            self.session.record_incorrect()
        print("Thanks for your feedback!")

        if verdict == 'incorrect' and correct_label:
            if record is None:
                print("No scan selected, correction not submitted")
            elif self.report_log is None:
                print("Misclassification reports are disabled")
            else:
                report = MisclassificationReport(
                    incorrect_classification=record.category,
                    correct_classification=correct_label,
                    image_ref=record.image_ref,
                    user_notes=notes
                )
                try:
                    result = self.report_log.submit(report)
                    print(result["message"])
                except (ValueError, OSError) as e:
                    print(f"Submission failed: {e}")
                    return 1

        print(f"Accuracy: {format_accuracy(self.session.feedback)}")
        self._warn_if_unsaved()
        return 0

    def cmd_stats(self) -> int:
        stats = self.session.get_statistics()
        print("Impact Dashboard")
        print(f"  Items sorted:    {stats['items_sorted']}")
        print(f"  Waste diverted:  {stats['waste_diverted_kg']:.2f} kg")
        print(f"  Landfill items:  {stats['landfill_items']}")
        print(f"  Accuracy:        {format_accuracy(self.session.feedback)}"
              f" ({stats['feedback_count']} responses)")
        print("Last 6 months (recycled / composted):")
        for month in monthly_breakdown(self.session.history):
            print(f"  {month['month']:<10} {month['recycled']:>3} / {month['composted']:>3}")
        return 0

    def cmd_rules(self) -> int:
        for category, rule in self.session.catalog.items():
            print(f"{category:<14} {rule.action.value}")
            print(f"  {rule.preparation}")
        return 0

    def cmd_clear(self) -> int:
        self.session.clear_history()
        print("History cleared")
        self._warn_if_unsaved()
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recycling-Wise scan history")
    parser.add_argument('--config', '-c', help='Configuration file path')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    scan = sub.add_parser('scan', help='Add a classified photo to history')
    scan.add_argument('image', help='Image file of the item')
    scan.add_argument('--label', '-l', required=True,
                      help='Item classification, e.g. "PET Bottle"')
    scan.add_argument('--idea', action='append', default=[],
                      help='Reuse idea to show with the result (repeatable)')

    sub.add_parser('history', help='List scan history')

    show = sub.add_parser('show', help='Open a past scan')
    show.add_argument('id')

    weight = sub.add_parser('weight', help='Record the weight of a scan in grams')
    weight.add_argument('id')
    weight.add_argument('grams')

    feedback = sub.add_parser('feedback', help='Confirm or reject a classification')
    feedback.add_argument('verdict', choices=['correct', 'incorrect'])
    feedback.add_argument('--id', help='Scan id, defaults to the open scan')
    feedback.add_argument('--correct', dest='correct_label',
                          help='What the item actually is')
    feedback.add_argument('--notes', help='Additional notes')

    sub.add_parser('stats', help='Show impact statistics')
    sub.add_parser('rules', help='List disposal rules')
    sub.add_parser('clear', help='Clear history and counters')

    return parser


def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.debug:
        config['log_level'] = 'DEBUG'

    app = RecyclingApp(config)

    if args.command == 'scan':
        return app.cmd_scan(args.image, args.label, args.idea)
    if args.command == 'history':
        return app.cmd_history()
    if args.command == 'show':
        return app.cmd_show(args.id)
    if args.command == 'weight':
        return app.cmd_weight(args.id, args.grams)
    if args.command == 'feedback':
        return app.cmd_feedback(args.verdict, args.id, args.correct_label, args.notes)
    if args.command == 'stats':
        return app.cmd_stats()
    if args.command == 'rules':
        return app.cmd_rules()
    if args.command == 'clear':
        return app.cmd_clear()
    return 1


if __name__ == "__main__":
    sys.exit(main())
