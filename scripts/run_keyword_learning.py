"""
Keyword learning operator script.

Previews and applies keyword learning from filing corrections, and manages
the learning event log.

Usage:
    python scripts/run_keyword_learning.py preview [--min-corrections N]
    python scripts/run_keyword_learning.py learn --file-type "RedBook Valuation"
    python scripts/run_keyword_learning.py learn-all
    python scripts/run_keyword_learning.py events [--limit N] [--include-dismissed] [--export events.csv]
    python scripts/run_keyword_learning.py stats
    python scripts/run_keyword_learning.py undo EVENT_ID
    python scripts/run_keyword_learning.py dismiss EVENT_ID
    python scripts/run_keyword_learning.py dismiss-all
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import pandas as pd

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from keyword_learning.database.connection import DatabaseManager
from keyword_learning.database.repositories import LearningStore
from keyword_learning.learning import KeywordLearner, LearningEventLog
from keyword_learning.utils.config_manager import ConfigManager

logger = logging.getLogger(__name__)


def setup_logging(log_dir: Path = Path('logs')) -> None:
    log_dir.mkdir(exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_dir / 'keyword_learning.log'),
            logging.StreamHandler()
        ]
    )


def print_json(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def run_command(args, store: LearningStore, config: ConfigManager) -> int:
    """Dispatch one sub-command. Returns the process exit code."""
    learner = KeywordLearner.from_config(store, config)
    event_log = LearningEventLog.from_config(store, config)

    if args.command == 'preview':
        candidates = learner.preview_learnable(min_corrections=args.min_corrections)
        print_json([c.to_dict() for c in candidates])

    elif args.command == 'learn':
        result = learner.learn_for_type(args.file_type)
        print_json(result.to_dict())
        return 0 if result.learned else 1

    elif args.command == 'learn-all':
        batch = learner.learn_all_pending()
        print_json(batch.to_dict())

    elif args.command == 'events':
        limit = args.limit or config.get_events_param('recent_limit')
        events = event_log.get_recent_events(limit=limit, include_dismissed=args.include_dismissed)
        rows = [e.to_dict() for e in events]
        if args.export:
            pd.DataFrame(rows).to_csv(args.export, index=False)
            logger.info(f"Exported {len(rows)} learning events to {args.export}")
        else:
            print_json(rows)

    elif args.command == 'stats':
        print_json(event_log.get_stats().to_dict())

    elif args.command == 'undo':
        print_json(event_log.undo(args.event_id).to_dict())

    elif args.command == 'dismiss':
        print_json({'success': event_log.dismiss(args.event_id)})

    elif args.command == 'dismiss-all':
        print_json({'success': True, 'dismissed': event_log.dismiss_all()})

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Learn file type keywords from user corrections')
    parser.add_argument(
        '--db',
        type=str,
        default=None,
        help='Path to SQLite database (default: database.path from config)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to YAML config file'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    preview = subparsers.add_parser('preview', help='Show learnable patterns without writing')
    preview.add_argument('--min-corrections', type=int, default=None,
                         help='Override the minimum corrections per pattern')

    learn = subparsers.add_parser('learn', help='Learn keywords for one corrected file type')
    learn.add_argument('--file-type', required=True, help='Corrected file type name')

    subparsers.add_parser('learn-all', help='Learn keywords for every corrected file type')

    events = subparsers.add_parser('events', help='List recent learning events')
    events.add_argument('--limit', type=int, default=None, help='Maximum events to list')
    events.add_argument('--include-dismissed', action='store_true', help='Include dismissed events')
    events.add_argument('--export', type=str, default=None, help='Write events to this CSV file')

    subparsers.add_parser('stats', help='Show learning statistics')

    undo = subparsers.add_parser('undo', help='Revert a learned keyword')
    undo.add_argument('event_id', type=int)

    dismiss = subparsers.add_parser('dismiss', help='Dismiss a learning event')
    dismiss.add_argument('event_id', type=int)

    subparsers.add_parser('dismiss-all', help='Dismiss every learning event')

    return parser


def main() -> int:
    args = build_parser().parse_args()
    setup_logging()

    config = ConfigManager(Path(args.config) if args.config else None)
    errors = config.validate_config()
    if errors:
        for error in errors:
            logger.error(f"Invalid configuration: {error}")
        return 2

    db = DatabaseManager(
        db_path=args.db or config.get_database_param('path'),
        echo=config.get_database_param('echo'),
    )
    db.create_all_tables()

    try:
        with db.session_scope() as session:
            return run_command(args, LearningStore.from_session(session), config)
    except LookupError as e:
        logger.error(str(e))
        return 1
    except Exception as e:
        logger.error(f"Fatal error during keyword learning: {e}", exc_info=True)
        raise
    finally:
        db.close()


if __name__ == '__main__':
    sys.exit(main())
