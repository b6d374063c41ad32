"""
Write standardized numeric ranges into every plant record.

Usage: python scripts/add_standardized_ranges.py [plants_dir]
"""

import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant_batch import apply_standardized_ranges
from plant_store import get_plants_dir


def main(argv):
    plants_dir = argv[1] if len(argv) > 1 else get_plants_dir()
    print(f"=== Adding standardized ranges in {plants_dir} ===")

    updated, errors = apply_standardized_ranges(plants_dir)

    print(f"Updated: {updated} plants")
    if errors:
        print(f"Errors: {len(errors)}")
        for error in errors:
            print(f"  - {error}")
    return 1 if errors else 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
