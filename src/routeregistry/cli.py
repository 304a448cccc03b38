"""Command-line tool for managing registry drafts.

Usage:
  routeregistry draft --version 1 --island-group Visayas --region-code 06 \\
      --province Iloilo --city "Iloilo City" [--use-next] [--overwrite]
  routeregistry validate
  routeregistry pub 1
"""

from __future__ import annotations

import argparse
import sys

from pydantic import ValidationError

from routeregistry.config import Settings
from routeregistry.errors import DraftExists, RegistryError, VersionConflict
from routeregistry.logging_config import setup_logging
from routeregistry.models.draft import DraftLocation
from routeregistry.models.registry import parse_version_number
from routeregistry.store import (
    VersionStore,
    create_draft,
    next_free_version,
    publish,
    validate_drafts,
)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="routeregistry", description="Manage route registry drafts")
    sub = p.add_subparsers(dest="command", required=True)

    d = sub.add_parser("draft", aliases=["d"], help="Create a new draft version")
    d.add_argument("--version", required=True, help="Draft version (non-negative integer)")
    d.add_argument("--island-group", required=True, choices=["Luzon", "Visayas", "Mindanao"])
    d.add_argument("--region-code", required=True, help="2-digit region code, e.g. 06")
    d.add_argument("--province", required=True)
    d.add_argument("--city", required=True)
    d.add_argument(
        "--use-next",
        action="store_true",
        help="If the version is already published, use the next free version instead",
    )
    d.add_argument("--overwrite", action="store_true", help="Replace an existing draft")
    d.set_defaults(handler=_cmd_draft)

    v = sub.add_parser("validate", aliases=["a"], help="Validate all draft versions")
    v.set_defaults(handler=_cmd_validate)

    pub = sub.add_parser("pub", aliases=["p"], help="Publish a draft version")
    pub.add_argument("version", help="Version number (e.g. 0, 5, 12)")
    pub.set_defaults(handler=_cmd_pub)

    return p.parse_args(argv)


def _stores(settings: Settings) -> tuple[VersionStore, VersionStore]:
    return VersionStore(settings.published_dir), VersionStore(settings.drafts_dir)


def _cmd_draft(ns: argparse.Namespace, settings: Settings) -> int:
    published, drafts = _stores(settings)
    version = parse_version_number(ns.version)
    try:
        location = DraftLocation(
            island_group=ns.island_group,
            region_code=ns.region_code,
            province=ns.province,
            city=ns.city,
        )
    except ValidationError as exc:
        for err in exc.errors():
            print(f"error: {err['loc'][0]}: {err['msg']}", file=sys.stderr)
        return 1

    if published.exists(version):
        suggested = next_free_version(published, version, probe=settings.registry.version_probe)
        if not ns.use_next:
            raise VersionConflict(
                f"Version {version} is already published; "
                f"re-run with --use-next to use version {suggested} instead"
            )
        print(f"Version {version} is already published, using version {suggested}")
        version = suggested

    try:
        data_file = create_draft(published, drafts, version, location, overwrite=ns.overwrite)
    except DraftExists as exc:
        print(f"Draft creation cancelled: {exc.message}. Re-run with --overwrite to replace it.")
        return 0
    print(f"Draft created: {data_file.parent}")
    print(f"  Schema: {data_file.parent.name}.schema.json")
    print(f"  Data file: {data_file.name}")
    print("Next: edit the data file, run `routeregistry validate`, then `routeregistry pub`.")
    return 0


def _cmd_validate(ns: argparse.Namespace, settings: Settings) -> int:
    _, drafts = _stores(settings)
    reports = validate_drafts(drafts)
    if not reports:
        print(f"No versioned drafts found in {drafts.root}")
        return 0

    for report in reports:
        name = f"v{report.version}"
        if report.ok and report.files_checked == 0:
            print(f"{name}: no data files to validate")
        elif report.ok:
            print(f"{name}: {report.files_checked} file(s) valid")
        else:
            for problem in report.problems:
                print(f"{name}: {problem}")

    failed = any(not report.ok for report in reports)
    print("Validation failed" if failed else "All drafts valid")
    return 1 if failed else 0


def _cmd_pub(ns: argparse.Namespace, settings: Settings) -> int:
    published, drafts = _stores(settings)
    version = parse_version_number(ns.version)
    target = publish(published, drafts, version)
    print(f"Published v{version} to {target}")
    return 0


def main(argv: list[str] | None = None) -> int:
    ns = _parse_args(list(sys.argv[1:] if argv is None else argv))
    settings = Settings()
    setup_logging(settings.logging)
    try:
        return ns.handler(ns, settings)
    except RegistryError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
