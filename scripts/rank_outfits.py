"""Rank outfits from a JSON request file and print the recommendations."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from outfit_recs.api.schemas import RecommendationRequest
from outfit_recs.monitoring.logging import configure_logging
from outfit_recs.recommender.ranker import RankedOutfit
from outfit_recs.services.recommendation import RecommendationService


def _format_result(position: int, ranked: RankedOutfit) -> str:
    name = ranked.outfit.name or ranked.outfit_id
    tags = ", ".join(sorted(ranked.outfit.tags)) or "-"
    return f"{position:>2}. {name} [{tags}] score={ranked.score:.3f}"


def print_results(results: Iterable[RankedOutfit]) -> None:
    for position, ranked in enumerate(results, start=1):
        print(_format_result(position, ranked))


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("request", type=Path, help="JSON file shaped like the POST /recommendations body")
    parser.add_argument("-k", type=int, default=None, help="override the number of outfits to return")
    parser.add_argument("--json", action="store_true", help="print the wire payload instead of a table")
    args = parser.parse_args()

    configure_logging()
    request = RecommendationRequest.model_validate_json(args.request.read_text(encoding="utf-8"))
    service = RecommendationService()
    result = service.recommend(
        [event.to_domain() for event in request.events],
        [outfit.to_domain() for outfit in request.outfits],
        request.prefs.to_domain(),
        request.target_date,
        k=args.k if args.k is not None else request.k,
        wear_history=[wear.to_domain() for wear in request.wear_history],
    )

    if args.json:
        print(json.dumps(result.to_payload(include_breakdown=request.include_breakdown), indent=2))
        return
    print(f"Occasion: {', '.join(result.desired_tags)}")
    print_results(result.recommendations)


if __name__ == "__main__":
    main()
