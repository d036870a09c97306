import pytest

from delivery_paths import DEFAULT_COST_FACTOR, get_cost_factor
from delivery_paths.config import parse_cost_factor


def test_default_cost_factor(monkeypatch):
    monkeypatch.delenv("DELIVERY_COST_FACTOR", raising=False)
    assert get_cost_factor() == DEFAULT_COST_FACTOR == 5


def test_cost_factor_from_environment(monkeypatch):
    monkeypatch.setenv("DELIVERY_COST_FACTOR", " 12 ")
    assert get_cost_factor() == 12


@pytest.mark.parametrize("raw", ["abc", "1.5", "-2"])
def test_invalid_cost_factor_names_its_source(monkeypatch, raw):
    monkeypatch.setenv("DELIVERY_COST_FACTOR", raw)
    with pytest.raises(ValueError, match="DELIVERY_COST_FACTOR"):
        get_cost_factor()


def test_parse_cost_factor_accepts_ints():
    assert parse_cost_factor(0) == 0
    assert parse_cost_factor("3") == 3
