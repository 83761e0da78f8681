from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from .config import DEFAULT_LOOKUP_CONFIG
from .models import Restaurant


class LocalDataSource:
    """Bundled restaurant dataset, already in the normalized Restaurant shape."""

    def __init__(self, path: Path = DEFAULT_LOOKUP_CONFIG.data_path) -> None:
        self.path = path
        self._records: list[Restaurant] | None = None
        self._df: pd.DataFrame | None = None

    def _load(self) -> None:
        # Read and parse errors propagate to the caller
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        records = [Restaurant.model_validate(row) for row in raw]

        df = pd.DataFrame(
            {
                "id": [r.id for r in records],
                "name": [r.name for r in records],
                "address": [r.address for r in records],
                "cuisine": [r.cuisine for r in records],
                "rating": [r.rating for r in records],
            }
        )
        # Lowercase text columns for case-insensitive lookup
        df["name_lower"] = df["name"].fillna("").str.lower()
        df["address_lower"] = df["address"].fillna("").str.lower()
        df["cuisine_lower"] = df["cuisine"].fillna("").str.lower()

        self._records = records
        self._df = df

    def _frame(self) -> pd.DataFrame:
        if self._df is None:
            self._load()
        return self._df

    def all(self) -> list[Restaurant]:
        """Return every restaurant in the dataset, loading it on first call."""
        if self._records is None:
            self._load()
        return list(self._records)

    def filter(
        self,
        term: str | None = None,
        cuisine: str | None = None,
        min_rating: float | None = None,
    ) -> list[Restaurant]:
        """Apply every given filter (AND) and return the matching rows in dataset order."""
        df = self._frame()
        mask = pd.Series(True, index=df.index)

        if term:
            term_lower = term.strip().lower()
            mask = mask & (
                df["name_lower"].str.contains(term_lower, regex=False)
                | df["address_lower"].str.contains(term_lower, regex=False)
                | df["cuisine_lower"].str.contains(term_lower, regex=False)
            )

        if cuisine:
            mask = mask & (df["cuisine_lower"] == cuisine.strip().lower())

        if min_rating:
            mask = mask & (df["rating"] >= float(min_rating))

        return [self._records[i] for i in df.index[mask.to_numpy()]]

    def get(self, restaurant_id: int) -> Restaurant | None:
        for restaurant in self.all():
            if restaurant.id == restaurant_id:
                return restaurant
        return None
