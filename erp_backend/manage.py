#!/usr/bin/env python
"""
PATH: manage.py

Management entrypoint for the ERP backend.

DJANGO_SETTINGS_MODULE defaults to backend.settings.dev, or
backend.settings.test when running `manage.py test`. The bare package name
"backend.settings" loads no apps, so it is treated as unset.
Production sets backend.settings.prod explicitly.
"""

from __future__ import annotations

import os
import sys

SETTINGS_PACKAGE = "backend.settings"


def _default_settings(argv: list[str]) -> str:
    command = argv[1] if len(argv) > 1 else ""
    return f"{SETTINGS_PACKAGE}.test" if command == "test" else f"{SETTINGS_PACKAGE}.dev"


def main() -> None:
    configured = (os.environ.get("DJANGO_SETTINGS_MODULE") or "").strip()
    if configured in ("", SETTINGS_PACKAGE):
        os.environ["DJANGO_SETTINGS_MODULE"] = _default_settings(sys.argv)

    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
