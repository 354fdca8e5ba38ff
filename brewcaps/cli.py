import argparse
import json
import sys
from typing import Dict, List, Optional

from brewcaps.config import get_settings
from brewcaps.domain import DeviceController, DeviceFactory
from brewcaps.domain.errors import BrewcapsError


def _parse_faults(values: List[str]) -> Dict[str, Dict[str, str]]:
    overrides: Dict[str, Dict[str, str]] = {}
    for value in values:
        capability_id, sep, reason = value.partition("=")
        if not sep or not capability_id or not reason:
            raise argparse.ArgumentTypeError(f"--fail expects CAPABILITY=REASON, got '{value}'")
        overrides[capability_id] = {"fault": reason}
    return overrides


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="brewcaps", description="Build and operate simulated coffee machines.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("kinds", help="List registered device kinds.")

    operate = sub.add_parser("operate", help="Build a device and run its usage sequence.")
    operate.add_argument("kind", help="Device kind, e.g. basic, grinder, wifi.")
    operate.add_argument("make", help="Manufacturer name.")
    operate.add_argument("model", help="Model name.")
    operate.add_argument("--fail", action="append", default=[], metavar="CAPABILITY=REASON",
                         help="Simulate a fault in a capability. May be repeated.")
    operate.add_argument("--json", action="store_true", help="Print the report as JSON.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    try:
        factory = DeviceFactory(settings=settings)
        if args.command == "kinds":
            for kind in factory.kinds():
                bundle = factory.bundle(kind)
                print(f"{kind}: {', '.join(bundle.capability_ids)}")
            return 0

        overrides = _parse_faults(args.fail)
        device = factory.create(args.kind, args.make, args.model, overrides=overrides)
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except BrewcapsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    report = DeviceController(settings=settings).operate_sync(device)
    if args.json:
        print(json.dumps(report.model_dump(mode="json"), indent=2))
    else:
        for line in report.description:
            print(line)
        for outcome in [report.brew, *report.optional]:
            if outcome is None:
                continue
            status = outcome.message if outcome.ok else f"FAILED ({outcome.error})"
            print(f"  {outcome.capability_id}: {status}")
        print(f"state: {report.state.value}")
    return 0 if report.brew is not None and report.brew.ok else 1


if __name__ == "__main__":
    sys.exit(main())
