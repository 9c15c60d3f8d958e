"""Flashcard import from CSV, JSON and YAML files."""
import csv
import io
import json
from pathlib import Path

CSV_TEMPLATE = "Question,Answer\nWhat is the capital of France?,Paris\nWhat is 2+2?,4\n"

HEADER_ROWS = {("question", "answer"), ("front", "back")}


def parse_csv_rows(text: str) -> list[tuple[str, str]]:
    """Split each non-blank line on its first comma into (front, back).

    Lines missing either side are skipped, as is a Question,Answer header.
    """
    rows = []
    for record in csv.reader(io.StringIO(text)):
        if len(record) < 2:
            continue
        front = record[0].strip()
        back = ",".join(record[1:]).strip()
        if not front or not back:
            continue
        if not rows and (front.lower(), back.lower()) in HEADER_ROWS:
            continue
        rows.append((front, back))
    return rows


def _rows_from_data(data) -> list[tuple[str, str]]:
    rows = []
    if isinstance(data, dict):
        data = data.get("cards", [])
    for item in data or []:
        if isinstance(item, dict):
            front, back = item.get("front"), item.get("back")
        elif isinstance(item, (list, tuple)) and len(item) >= 2:
            front, back = item[0], item[1]
        else:
            continue
        if front and back:
            rows.append((str(front).strip(), str(back).strip()))
    return rows


def read_card_rows(file_path: str) -> list[tuple[str, str]]:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _rows_from_data(json.loads(path.read_text()))
    elif suffix in (".yaml", ".yml"):
        import yaml
        return _rows_from_data(yaml.safe_load(path.read_text()))
    else:
        # .csv, .txt and anything else is read as comma separated text
        return parse_csv_rows(path.read_text())
