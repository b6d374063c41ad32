"""
Rewrite the plants index.json from the files on disk.

Usage: python scripts/rebuild_index.py [plants_dir]
"""

import os
import sys

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant_store import get_plants_dir, rebuild_index


def main(argv):
    plants_dir = argv[1] if len(argv) > 1 else get_plants_dir()
    if not os.path.isdir(plants_dir):
        print(f"Plants directory not found: {plants_dir}")
        return 1

    index = rebuild_index(plants_dir)
    print(f"index.json rebuilt: {index['count']} plants")
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
