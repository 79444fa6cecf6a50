#!/usr/bin/env python3
"""
Show bookable slots and the current meeting calendar from the configured backend.
"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

logging.basicConfig(level=logging.WARNING)  # Reduce noise

load_dotenv()

from opsdash.backend.provider import select_backend
from opsdash.calendar.grid import group_by_day, month_grid
from opsdash.core.config import load_config
from opsdash.rendering.plaintext import render_availability_plaintext, render_calendar_plaintext
from opsdash.scheduling.errors import SchedulingError
from opsdash.scheduling.lifecycle import MeetingLifecycleManager
from opsdash.utils.dates import today_in


async def run() -> int:
    config = load_config()
    backend = select_backend(config)
    manager = MeetingLifecycleManager(backend)

    print("=" * 80)
    print(f"AVAILABILITY ({config.backend_driver} backend)")
    print("=" * 80)

    try:
        index = await manager.refresh_availability()
        meetings = await manager.refresh_meetings()
    except SchedulingError as e:
        print(f"Error: {e.message}")
        return 1
    finally:
        await backend.aclose()

    print(f"{index.slot_count} slots on {len(index.unique_dates)} days")
    print()
    print(render_availability_plaintext(index))

    today = today_in(config.timezone)
    buckets = group_by_day(meetings, today=today)
    months = sorted({(int(day[:4]), int(day[5:7])) for day in buckets}) or [(today.year, today.month)]
    for year, month in months:
        print()
        print(render_calendar_plaintext(month_grid(year, month, buckets, today=today)))
    return 0


def main() -> None:
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
