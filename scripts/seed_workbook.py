#!/usr/bin/env python3
"""Create the org chart workbooks and optionally fill them with the demo organisation.

Run from the project root:

    python3 scripts/seed_workbook.py --org-workbook data/org.xlsx \
        --team-list-workbook data/team_list.xlsx [--sample-data] [--verbose]

Paths default to ORG_WORKBOOK / TEAM_LIST_WORKBOOK from the environment or .env.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from orgchart.core.cache import TTLCache  # noqa: E402
from orgchart.core.config import Settings  # noqa: E402
from orgchart.core.row_store import WorkbookRowStore  # noqa: E402
from orgchart.services.setup_service import OrgSetupService  # noqa: E402

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create Team Mappings, Vacant Positions and Team List sheets",
    )
    parser.add_argument(
        "--org-workbook",
        default=None,
        help="Workbook holding Team Mappings and Vacant Positions (default: $ORG_WORKBOOK)",
    )
    parser.add_argument(
        "--team-list-workbook",
        default=None,
        help="Workbook holding the Team List roster (default: $TEAM_LIST_WORKBOOK)",
    )
    parser.add_argument(
        "--sample-data",
        action="store_true",
        help="Replace sheet contents with the demo organisation",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


def seed(args: argparse.Namespace, settings: Settings | None = None) -> dict[str, Any]:
    settings = settings or Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    org_path = args.org_workbook or settings.ORG_WORKBOOK
    team_list_path = args.team_list_workbook or settings.TEAM_LIST_WORKBOOK
    if not org_path or not team_list_path:
        logger.error("Both workbook paths are required (flags or ORG_WORKBOOK / TEAM_LIST_WORKBOOK)")
        return {"success": False, "error": "workbook paths not configured"}

    setup = OrgSetupService(
        WorkbookRowStore(org_path),
        WorkbookRowStore(team_list_path),
        TTLCache(),
        team_list_sheet=settings.TEAM_LIST_SHEET,
        teams_sheet=settings.TEAM_MAPPINGS_SHEET,
        vacant_sheet=settings.VACANT_POSITIONS_SHEET,
    )

    logger.info("Seeding %s and %s...", org_path, team_list_path)
    result = setup.setup(include_sample_data=args.sample_data)
    if not result["success"]:
        logger.error("Setup failed: %s", result.get("error"))
        return result

    health = setup.health_check()
    for issue in health["issues"]:
        logger.warning("Health: %s", issue)
    if "sample_data" in result:
        logger.info(result["sample_data"].get("message", ""))
    logger.info("Seeding complete (healthy: %s)", health["healthy"])
    return result


def main() -> None:
    result = seed(parse_args())
    sys.exit(0 if result["success"] else 1)


if __name__ == "__main__":
    main()
