#!/usr/bin/env python
"""Django management entrypoint for the example schedule sync project.

Usage::

    python manage.py sync_schedule
    python manage.py pretalx_data questions
"""

import os
import sys


def main() -> None:
    """Run administrative tasks."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "settings")
    from django.core.management import execute_from_command_line

    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
