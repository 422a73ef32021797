#!/usr/bin/env python

"""
FocusHUD - Main Entry Point

An always-on-top overlay for one "current task": the running Toggl Track
entry is resumed at startup, play/pause starts and stops Toggl entries, and
the next task is suggested from a ClickUp list (due today).

Usage:
    python main.py

Configuration:
    config/settings.yaml, ~/.config/focushud/settings.yaml, or
    FOCUSHUD_TOGGL__API_TOKEN / FOCUSHUD_CLICKUP__API_TOKEN /
    FOCUSHUD_CLICKUP__LIST_ID environment variables
"""

import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from focushud.infra.config import get_settings
from focushud.ui import FocusHudApp


def main():
    """Main entry point"""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FocusHudApp(settings)
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
