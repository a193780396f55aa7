#!/usr/bin/env python3
"""Reference converter artifact: CSV rows to a JSON array of objects.

A converter repository ships this module as ``dist/converter.py`` (either
committed or written by its ``build.py``). ``fc`` imports it and validates
the ``CONVERTER`` export.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Mapping
from typing import Any


class CsvToJson:
    """Convert a header-first CSV file into a JSON list of records."""

    name = "csv2json"
    description = "Convert CSV files to JSON"
    source_formats = ["csv", "tsv"]
    target_formats = ["json"]

    def get_options(self) -> dict[str, dict[str, Any]]:
        return {
            "indent": {
                "description": "Indentation width of the JSON output",
                "required": False,
                "default": 2,
            },
            "delimiter": {
                "description": "Column delimiter; tab for .tsv inputs",
                "required": False,
                "default": None,
            },
        }

    def convert(self, input_path: str, output_path: str, options: Mapping[str, Any]) -> bool:
        delimiter = options.get("delimiter") or ("\t" if input_path.endswith(".tsv") else ",")
        with open(input_path, newline="", encoding="utf-8") as src:
            rows = list(csv.DictReader(src, delimiter=delimiter))
        with open(output_path, "w", encoding="utf-8") as dst:
            json.dump(rows, dst, indent=options.get("indent", 2))
            dst.write("\n")
        return True


CONVERTER = CsvToJson()
