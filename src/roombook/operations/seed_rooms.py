"""Seed rooms for local/staging use.

Usage:
    DATABASE_URL=... roombook-seed-rooms 101 102 103
    DATABASE_URL=... SEED_ROOM_NUMBERS="101,102" roombook-seed-rooms

Idempotent: re-running with the same room numbers keeps the existing ids.
"""

import os
import sys

from roombook.infra.db import txn
from roombook.infra.repositories.rooms_repository import RoomsRepository


def _room_numbers(argv: list[str]) -> list[str]:
    if argv:
        return argv
    raw = os.getenv("SEED_ROOM_NUMBERS", "")
    return [n.strip() for n in raw.split(",") if n.strip()]


def main(argv: list[str] | None = None) -> int:
    numbers = _room_numbers(sys.argv[1:] if argv is None else argv)
    if not numbers:
        print("Usage: roombook-seed-rooms <room_number> [<room_number> ...]")
        return 2

    repo = RoomsRepository()
    with txn() as cur:
        rooms = [repo.insert_room(cur, room_number=n) for n in numbers]

    for room in rooms:
        print(f"room {room.room_number}: id={room.id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
