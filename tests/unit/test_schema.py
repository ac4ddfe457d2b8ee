"""Tests for the declared schema."""

import pytest

from src.core.schema import UNIQUE_KEYS, schema_statements
from src.domain.swap import ACTIVE_STATUSES
from src.services import swap_service


@pytest.mark.unit
class TestSchema:
    """Tests for unique keys and DDL rendering."""

    def test_active_swap_index_covers_active_statuses(self):
        [key] = [k for k in UNIQUE_KEYS if k.name == "idx_swap_active_tuple"]

        assert set(key.partial_statuses) == ACTIVE_STATUSES
        assert key.to_sql().endswith("WHERE status IN ('accepted', 'pending')")

    def test_active_filter_uses_same_statuses(self):
        for status in ACTIVE_STATUSES:
            assert f'status = "{status}"' in swap_service._ACTIVE_FILTER

    def test_every_unique_key_is_rendered(self):
        statements = schema_statements()

        for key in UNIQUE_KEYS:
            assert key.to_sql() in statements
