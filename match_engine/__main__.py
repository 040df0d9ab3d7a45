"""
Run a single matching query from the command line.

    python -m match_engine --data fixtures.yaml jobs cand-1 --threshold 0.6
    python -m match_engine --data fixtures.yaml candidates job-7 --require-skill python
"""
import argparse
import json
import logging
import sys

from match_engine.app_context import AppContext
from match_engine.config_loader import load_config
from match_engine.data_store import InMemoryDataStore
from match_engine.errors import MatchingError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Candidate-job matching engine")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML")
    parser.add_argument("--data", required=True, help="YAML/JSON file with candidates and jobs")
    parser.add_argument("mode", choices=["jobs", "candidates"],
                        help="'jobs' ranks jobs for a candidate, 'candidates' ranks candidates for a job")
    parser.add_argument("subject_id", help="Candidate id (jobs mode) or job id (candidates mode)")
    parser.add_argument("--threshold", type=float, default=None, help="Minimum score on a 0-1 scale")
    parser.add_argument("--max-results", type=int, default=None)
    parser.add_argument("--require-skill", action="append", default=None, dest="required_skills",
                        help="Skill the target must have (repeatable)")
    parser.add_argument("--deadline", type=float, default=None, help="Overall deadline in seconds")
    parser.add_argument("--partial", action="store_true", help="Return partial results on deadline")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    try:
        store = InMemoryDataStore.from_file(args.data)
    except MatchingError as e:
        logger.error(f"Could not load {args.data} ({e.kind.value}): {e}")
        return 1
    context = AppContext.build(config, store)

    filters = {
        key: value
        for key, value in (
            ("threshold", args.threshold),
            ("max_results", args.max_results),
            ("required_skills", args.required_skills),
        )
        if value is not None
    }
    deadline = args.deadline if args.deadline is not None else config.matching.deadline_seconds

    service = context.matching_service
    try:
        if args.mode == "jobs":
            batch = service.find_matching_jobs(args.subject_id, filters, deadline, args.partial or None)
        else:
            batch = service.find_matching_candidates(args.subject_id, filters, deadline, args.partial or None)
    except MatchingError as e:
        logger.error(f"Matching failed ({e.kind.value}): {e}")
        return 1

    print(json.dumps(batch.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
