"""
Category keyword table loader.
Loads CSV files that replace the built-in category keyword table.
"""

import csv
from typing import Dict, List
from pathlib import Path


def load_category_keywords_csv(csv_path: str) -> Dict[str, List[str]]:
    """
    Load an ordered category keyword table from CSV file.

    Categories keep the order in which they first appear, which is also the
    order in which they are tried during categorization.

    Args:
        csv_path: Path to CSV file containing category keywords

    Returns:
        Dictionary mapping category names to keyword lists

    Example CSV format:
        category,keyword
        food,grocery
        food,restaurant
        transportation,uber
    """
    table: Dict[str, List[str]] = {}

    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"Category keyword file not found: {csv_path}")

    with open(csv_path, 'r', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        missing = {'category', 'keyword'} - set(reader.fieldnames or [])
        if missing:
            raise ValueError(
                f"Category keyword file {csv_path} is missing columns: {sorted(missing)}"
            )
        for row in reader:
            category = (row.get('category') or '').strip().lower()
            keyword = (row.get('keyword') or '').strip().lower()
            if category and keyword:
                keywords = table.setdefault(category, [])
                if keyword not in keywords:
                    keywords.append(keyword)

    if not table:
        raise ValueError(f"Category keyword file {csv_path} contains no keywords")

    return table
