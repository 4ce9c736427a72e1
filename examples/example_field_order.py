#!/usr/bin/env python3
"""
Example: Inferring Field Order from JSON Records

The following is demonstrated:
- Building a poset from the field order of several records
- Reading the Hasse edges and the incomparable field pairs
- Extracting a deterministic linear extension
- Detecting contradictory records through the blocked key set
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hassemap import Poset
from hassemap.io import format_report, parse_rows
from hassemap.network_analysis import PosetAnalyzer


RECORDS = """
{"id": 1, "name": "ada", "email": "ada@example.org", "created": "2024-01-01"}
{"id": 2, "name": "bob", "phone": "555-0100", "created": "2024-01-02"}
{"id": 3, "email": "cy@example.org", "phone": "555-0101", "created": "2024-01-03"}
"""


def main():
    rows = parse_rows(RECORDS)
    poset = Poset.from_rows(rows)

    print("=" * 70)
    print("Field order report")
    print("=" * 70)
    print(format_report(poset))

    analyzer = PosetAnalyzer(poset)
    print()
    print(f"Levels: {analyzer.levels()}")
    print(f"Height: {analyzer.height()}, width >= {analyzer.width_lower_bound()}")

    # Contradicting the established order of "id" and "name" creates a cycle.
    poset.add_row(["name", "id"])
    poset.normalize()
    result = poset.topological_order()
    print()
    print(f"After a contradicting record, blocked keys: {list(result.blocked)}")
    print(f"Cycle groups: {PosetAnalyzer(poset).cycle_groups()}")


if __name__ == "__main__":
    main()
