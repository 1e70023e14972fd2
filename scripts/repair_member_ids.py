#!/usr/bin/env python3
"""
Maintenance Script: Repair Plan memberIds

Rebuilds the denormalized ``memberIds`` list of plans whose list is missing
ids present in the ``members`` map. Runs against Firestore directly with the
configured service account.

Usage:
    python scripts/repair_member_ids.py
    python scripts/repair_member_ids.py --plan-id <planId>
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import tripshare modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from tripshare.config import logger
from tripshare.core.plans.repair import MemberIdsRepairService
from tripshare.errors import CallableError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Repair plan memberIds from the members map")
    parser.add_argument("--plan-id", help="Repair a single plan instead of scanning all plans")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Run the memberIds repair."""
    args = parse_args(argv)
    service = MemberIdsRepairService()

    try:
        if args.plan_id:
            result = service.repair_plan(args.plan_id)
            if result.new_member_ids is not None:
                logger.info("  old: %s", result.old_member_ids)
                logger.info("  new: %s", result.new_member_ids)
        else:
            result = service.repair_all()
            for plan_id in result.repaired_plan_ids:
                logger.info("  - %s", plan_id)
        logger.info(result.message)
        return 0

    except CallableError as e:
        logger.error("memberIds repair failed: %s (%s)", e.message, e.code.value)
        return 1


if __name__ == "__main__":
    sys.exit(main())
