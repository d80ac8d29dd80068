"""Shared test fixtures."""

import pytest

from builders import entity

from client.reconciler import EntityReconciler


@pytest.fixture
def reconciler() -> EntityReconciler:
    """Fresh reconciler with an empty pool."""
    return EntityReconciler()


@pytest.fixture
def town_players():
    """Two players standing in Town, id 7 and id 9."""
    return {
        "Town": {
            "Players": {
                7: entity(7, 1, 2, "Town", Name="me", Score=3, Speed=1.5),
                9: entity(9, 5, 5, "Town", Name="other", Score=1, Speed=1.0),
            }
        }
    }
