"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services/domains avoid SQL strings.
Every function takes the connection it runs on; none opens its own.
"""
from __future__ import annotations
