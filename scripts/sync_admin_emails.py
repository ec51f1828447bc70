"""
Add addresses to the admin allow-list, or replace it outright.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cms.dependencies import get_admin_email_store
from cms.errors import CmsError, ConflictError

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Manage the admin email allow-list")
    parser.add_argument("emails", nargs="+", help="Email addresses")
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Replace the whole list instead of adding to it",
    )
    parser.add_argument("--modified-by", default="cli")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    store = get_admin_email_store()
    try:
        if args.replace:
            store.replace(args.emails, args.modified_by)
        else:
            for email in args.emails:
                try:
                    store.add(email, args.modified_by)
                except ConflictError:
                    logger.info("%s is already an admin", email)
    except CmsError as exc:
        logger.error("Failed to update admin emails: %s", exc.message)
        return 1

    logger.info("Admin emails: %s", ", ".join(store.emails()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
