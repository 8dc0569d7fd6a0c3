#!/usr/bin/env python3
"""
BioForge State Export

Prints the generated protocol or the backup bundle for the configured state
blob (BIOFORGE_STATE_PATH, or DATABASE_URL + BIOFORGE_STATE_KEY).

Usage:
    python scripts/export_state.py protocol [--output FILE]
    python scripts/export_state.py backup [--output FILE]
    python scripts/export_state.py state

Exit codes:
    0  exported
    1  nothing to export (no current plan)
    2  state could not be read
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from bioforge.config import get_settings
from bioforge.derive.protocol import generate_protocol
from bioforge.session import AppState
from bioforge.storage.errors import StateStoreError

logger = logging.getLogger("export_state")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Export BioForge protocol, backup bundle or raw state"
    )
    parser.add_argument(
        "what",
        choices=["protocol", "backup", "state"],
        help="What to export"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write to this file instead of stdout"
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        state = AppState.from_settings(settings)
    except StateStoreError as e:
        logger.error(f"Cannot load state: {e}")
        return 2

    if args.what == "protocol":
        protocol = generate_protocol(state.current_plan, state.catalog)
        if protocol is None:
            logger.error("No current plan; nothing to export")
            return 1
        payload = protocol.model_dump(mode="json")
    elif args.what == "backup":
        payload = state.backup_bundle().to_blob()
    else:
        payload = state.snapshot()

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.what} to {args.output}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
