#!/usr/bin/env python3
"""Skill Exchange Matching Engine CLI."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from config.settings import Settings
from core.exceptions import MatchingError, RankingTimeoutError
from orchestrator import MatchingService
from schemas.matching import MatchingResponse
from schemas.profile import UserProfile


def load_profiles(path: str) -> list[UserProfile]:
    """
    Load user profiles from a YAML or JSON file.

    The file holds either a list of profiles or a mapping with a ``users`` list.
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        data = data.get("users", [])

    return [UserProfile.model_validate(entry) for entry in data]


def print_matches(user_id: str, response: MatchingResponse):
    """Print ranked matches with their sub-scores."""
    print("\n" + "="*60)
    print(f"MATCHES FOR {user_id}")
    print("="*60 + "\n")
    for i, match in enumerate(response.matches, 1):
        score = match.match_score
        print(
            f"{i}. {match.user_b.id} ({match.user_b.username or '-'}) "
            f"total={score.total_score:.3f} "
            f"a->b={score.semantic_score_a_to_b:.3f} "
            f"b->a={score.semantic_score_b_to_a:.3f} "
            f"lang={score.language_score:.3f} "
            f"trust={score.trust_score:.3f}"
        )
    print(
        f"\n{len(response.matches)} of {response.total_candidates} candidates "
        f"in {response.processing_time_ms:.0f}ms"
    )
    for error in response.errors:
        print(f"warning: {error}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Skill Exchange Matching Engine - rank users by skill, language and trust compatibility"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to the SQLite profile store (default: data/users.db)"
    )
    parser.add_argument(
        "--backend",
        type=str,
        choices=["sentence_transformers", "openai", "hashing"],
        help="Embedding backend (default: sentence_transformers)"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    load_parser = subparsers.add_parser("load", help="Load profiles from a YAML/JSON file")
    load_parser.add_argument("--profiles", type=str, required=True, help="Profiles file")

    find_parser = subparsers.add_parser("find", help="Find matches for a user")
    find_parser.add_argument("--user-id", type=str, required=True, help="Query user ID")
    find_parser.add_argument("--min-score", type=float, help="Minimum match score (default: 0.3)")
    find_parser.add_argument("--max-results", type=int, help="Maximum number of matches (default: 50)")
    find_parser.add_argument(
        "--bidirectional",
        action="store_true",
        help="Require both skill directions to reach the minimum score"
    )

    score_parser = subparsers.add_parser("score", help="Score two users against each other")
    score_parser.add_argument("--user-a", type=str, required=True, help="First user ID")
    score_parser.add_argument("--user-b", type=str, required=True, help="Second user ID")

    subparsers.add_parser("health", help="Show embedding provider status")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    settings = Settings(
        db_path=args.db_path,
        embedding_backend=args.backend,
        verbose=args.verbose,
    )

    try:
        service = MatchingService(settings=settings)

        if args.command == "load":
            profiles = load_profiles(args.profiles)
            for profile in profiles:
                service.repository.save(profile)
            print(f"Loaded {len(profiles)} profiles from {Path(args.profiles).name}")

        elif args.command == "find":
            service.initialize()
            config = settings.build_matching_config(
                min_match_score=args.min_score,
                max_results=args.max_results,
                enable_bidirectional_matching=args.bidirectional,
            )
            try:
                response = service.find_matches(args.user_id, config)
            except RankingTimeoutError as e:
                if e.partial is not None:
                    print_matches(args.user_id, e.partial)
                print(f"Error: {e}; showing partial results", file=sys.stderr)
                return 1
            print_matches(args.user_id, response)

        elif args.command == "score":
            service.initialize()
            score = service.score_users(args.user_a, args.user_b)
            print(score.model_dump_json(indent=2))

        elif args.command == "health":
            service.initialize()
            print(yaml.safe_dump(service.health(), sort_keys=False))

    except (MatchingError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
