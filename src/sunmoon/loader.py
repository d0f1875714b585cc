import json
import math
import os
from typing import Any, Dict, List

import pandas as pd

# Columns that the puzzle store keeps as JSON-encoded text.
_JSON_FIELDS = ("board", "solution", "clues")


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzle records from a file. Handles .parquet, .csv, .json and .jsonl.
    Returns a list of raw puzzle dictionaries ready for `parse_puzzle`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    def _is_missing(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, float) and math.isnan(value):
            return True
        return isinstance(value, str) and value.strip() == ""

    def _decode(value: Any) -> Any:
        if isinstance(value, str) and value.strip()[:1] in ("[", "{"):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                return value
        return value

    def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
        record = {k: (None if _is_missing(v) else v) for k, v in record.items()}

        for key in _JSON_FIELDS:
            if key in record:
                record[key] = _decode(record[key])

        if record.get("size") is None and record.get("board") is not None:
            board = record["board"]
            if isinstance(board, str):
                board = [line for line in board.splitlines() if line.strip()]
            record["size"] = len(board)
        if record.get("size") is not None:
            record["size"] = int(record["size"])

        if record.get("id") is None:
            record.pop("id", None)
        return record

    # Case 1: Parquet / CSV (tabular)
    if file_path.endswith(".parquet") or file_path.endswith(".csv"):
        try:
            if file_path.endswith(".parquet"):
                df = pd.read_parquet(file_path)
            else:
                df = pd.read_csv(file_path, dtype={"id": str})
            records = df.to_dict(orient="records")
            return [_normalize_record(r) for r in records]
        except Exception as e:
            print(f"Error reading {file_path}: {e}")
            return []

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if isinstance(payload, list):
                return [_normalize_record(p) for p in payload if isinstance(p, dict)]
            if isinstance(payload, dict):
                return [_normalize_record(payload)]
            return []
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _read_jsonl(file_path, _normalize_record)

    # Case 3: JSONL File (Text)
    return _read_jsonl(file_path, _normalize_record)


def _read_jsonl(file_path: str, normalize) -> List[Dict[str, Any]]:
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                data.append(normalize(obj))
    return data
