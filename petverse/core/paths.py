"""
Centralized path helpers.
"""
from __future__ import annotations
from pathlib import Path

# This file lives at petverse/core/paths.py
PACKAGE = Path(__file__).resolve().parents[1]   # the 'petverse' package dir
ROOT = PACKAGE.parent
ASSETS = PACKAGE / "assets"
CATALOG = ASSETS / "catalog"
TYPES_FILE = CATALOG / "types.json"
ABILITIES_FILE = CATALOG / "abilities.json"
TECHNIQUES_FILE = CATALOG / "techniques.json"
