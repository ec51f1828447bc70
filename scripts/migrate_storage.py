"""
Copy JSON documents between storage backends, e.g. local files to Vercel Blob.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cms.config import get_settings
from cms.dependencies import COLLECTIONS
from cms.migration import copy_documents
from cms.site import (
    ADMIN_EMAILS_DOCUMENT,
    CONTACT_INFO_DOCUMENT,
    SITE_SETTINGS_DOCUMENT,
    THEME_SETTINGS_DOCUMENT,
)
from cms.storage import build_storage_client

logger = logging.getLogger(__name__)

BACKENDS = ("file", "blob", "firebase")

ALL_DOCUMENTS = [document for _, document, _ in COLLECTIONS.values()] + [
    SITE_SETTINGS_DOCUMENT,
    CONTACT_INFO_DOCUMENT,
    ADMIN_EMAILS_DOCUMENT,
    THEME_SETTINGS_DOCUMENT,
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Copy documents between storage backends")
    parser.add_argument("--source", choices=BACKENDS, required=True)
    parser.add_argument("--target", choices=BACKENDS, required=True)
    parser.add_argument(
        "--document",
        action="append",
        choices=ALL_DOCUMENTS,
        help="Document to copy (repeatable). Defaults to all.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Replace documents that already exist in the target",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    if args.source == args.target:
        logger.error("Source and target must differ")
        return 1

    settings = get_settings()
    source = build_storage_client(args.source, settings)
    target = build_storage_client(args.target, settings)
    results = copy_documents(
        source, target, args.document or ALL_DOCUMENTS, overwrite=args.overwrite
    )
    for name, outcome in results.items():
        logger.info("%s: %s", name, outcome)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
