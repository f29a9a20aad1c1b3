import os
import sys
# Ensure project root is in sys.path
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(SCRIPT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)
from cutpath.config import load_settings
from cutpath.utils.batch import ENTITY_TYPES, inventory_directory

# Directory containing DXF files (override with the first argument)
DXF_DIR = os.path.join(PROJECT_ROOT, 'Inputs', 'secondary_test_samples')

# Output CSV file
OUTPUT_CSV = os.path.join(SCRIPT_DIR, 'dxf_entity_inventory.csv')


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    directory = argv[0] if argv else DXF_DIR
    output_csv = argv[1] if len(argv) > 1 else OUTPUT_CSV
    if not os.path.isdir(directory):
        print(f"DXF directory not found: {directory}")
        return 1
    rows = inventory_directory(directory, output_csv, load_settings())
    print(f"Inventory complete. Results written to {output_csv}")
    print("\nSummary:")
    print(f"{'File':40} {'Length':>12} {'Pierces':>8} " + " ".join([f"{t:8}" for t in ENTITY_TYPES]))
    for row in rows:
        print(f"{row['filename'][:40]:40} {row['total_length']:>12} {row['pierce_count']:>8} "
              + " ".join([f"{str(row[t]):8}" for t in ENTITY_TYPES]))
    return 0


if __name__ == '__main__':
    sys.exit(main())
