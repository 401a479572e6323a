"""
Reset the review store.

DANGEROUS: This deletes every review record and the review log!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_learning_db
    python -m scripts.maintenance.reset_learning_db --yes
"""

import argparse
import logging

from lahja import srs


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Drop and recreate the review tables.")
    parser.add_argument("--yes", action="store_true", help="skip the confirmation prompt")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    target = "TEST database" if srs.is_test_mode() else "database"
    print("=" * 60)
    print(f"WARNING: Reset review {target}")
    print("=" * 60)
    print()
    print("This will DELETE:")
    print("  - All ease/interval records (ease factor, interval, repetitions)")
    print("  - All stage records (stage, review counts)")
    print("  - All review events")
    print()

    if not args.yes:
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.strip().lower() != "yes":
            print("\nCancelled. No changes made.")
            return 1

    print("\nResetting database...")
    srs.reset_db()
    print("Database reset complete. Tables are empty and ready for new reviews.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
