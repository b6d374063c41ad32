"""
Recompute vivariumType and the habitat type tags of every plant record.

Run add_standardized_ranges.py first if the stored ranges are out of date;
the fit is always computed from the record's text fields.

Usage: python scripts/assign_vivarium_types.py [plants_dir]
"""

import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant_batch import apply_vivarium_types
from plant_store import get_plants_dir


def main(argv):
    plants_dir = argv[1] if len(argv) > 1 else get_plants_dir()
    print(f"=== Assigning vivarium types in {plants_dir} ===")

    updated, errors = apply_vivarium_types(plants_dir)

    print(f"Updated: {updated} plants")
    if errors:
        print(f"Skipped: {len(errors)}")
        for error in errors:
            print(f"  - {error}")
    return 1 if errors else 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
