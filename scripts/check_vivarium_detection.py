"""
Dry run of vivarium detection: print the fit of each plant next to the
vivariumType currently stored, without writing anything.

Usage: python scripts/check_vivarium_detection.py [plants_dir | file.json ...]
"""

import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant_batch import detect_vivarium_types
from plant_store import find_plant_files, get_plants_dir


def _format_range(data):
    if not data:
        return '-'
    return f"{data['min']}-{data['max']}% (ideal {data['ideal']})"


def _paths(args):
    if not args:
        return find_plant_files(get_plants_dir())
    paths = []
    for arg in args:
        if os.path.isdir(arg):
            paths.extend(find_plant_files(arg))
        else:
            paths.append(arg)
    return paths


def main(argv):
    rows = detect_vivarium_types(_paths(argv[1:]))
    changed = 0
    failed = 0

    for row in rows:
        print(f"\n{row.get('name') or row['file']} ({row.get('scientificName', '')})")
        if row.get('error'):
            failed += 1
            print(f"  ERROR: {row['error']}")
            continue

        print(f"  Substrate: {row['substrateType']}, special needs: {row['specialNeeds']}")
        print(f"  Humidity: {_format_range(row['humidityRange'])}")
        print(f"  Air circulation: {_format_range(row['airCirculationRange'])}")
        for name, score in sorted(row['scores'].items(), key=lambda item: -item[1]):
            print(f"    {name:<18} {score:6.2f}")
        print(f"  Stored:   {', '.join(row['stored']) or '-'}")
        print(f"  Detected: {', '.join(row['results']) or '-'}")
        if sorted(row['stored']) != sorted(row['results']):
            changed += 1
            print("  -> would change")

    print(f"\nChecked {len(rows)} plants: {changed} would change, {failed} failed")
    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
