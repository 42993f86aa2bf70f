"""Command-line entry point.

    python -m trip_stream "3 days in Chiang Mai, temples and food"
    python -m trip_stream --offline --map trip.html "anything"

The narrative is printed while it streams; a summary of the decoded
itinerary follows.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import get_config
from .container import Container, get_container
from .domain.errors import TripStreamError
from .logging_setup import configure_logging
from .services import TripPlannerService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trip_stream",
        description="Plan a trip with a generative model and map its waypoints.",
    )
    parser.add_argument("prompt", nargs="+", help="Free-text trip request")
    parser.add_argument("--map", type=Path, default=None, help="Write an HTML map here")
    parser.add_argument("--save", action="store_true", help="Save the trip to storage")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Replay a canned response instead of calling the model",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = get_config()
    if args.offline:
        config = config.model_copy(
            update={"llm": config.llm.model_copy(update={"provider": "static"})}
        )
        container = Container.create_default(config)
    else:
        container = get_container()
    configure_logging(config.observability)
    planner: TripPlannerService = container.resolve(TripPlannerService)

    prompt = " ".join(args.prompt)
    result, error = planner.plan_safe(prompt, on_narrative=lambda s: print(s, end="", flush=True))
    print()

    if result is None:
        print(error, file=sys.stderr)
        return 1

    map_path = None
    try:
        if args.map and result.payload is not None:
            map_path = planner.render_map(result.payload, args.map)
        if args.save and result.payload is not None:
            if config.storage.backend == "memory":
                print(
                    "Not saved: the memory backend does not outlive this process;"
                    " set TRIP_STORAGE_BACKEND=mongo",
                    file=sys.stderr,
                )
            else:
                trip_id = planner.save_trip(result)
                print(f"Saved trip {trip_id}")
    except TripStreamError as e:
        print(f"Error: {e}", file=sys.stderr)

    print(planner.format_result(result, map_path))
    return 0 if result.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
