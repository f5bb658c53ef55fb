import pytest

from mealgrid.events import web_observers
from mealgrid.infra import paths


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Point every data file at a temporary directory (don't alter the real ones)."""
    monkeypatch.setattr(paths, "DATA_DIR", tmp_path)
    monkeypatch.setattr(paths, "MEALS_FILE", tmp_path / "meals.json")
    monkeypatch.setattr(paths, "MEAL_PLANS_FILE", tmp_path / "meal_plans.json")
    monkeypatch.setattr(paths, "PLAN_ACCESS_FILE", tmp_path / "meal_plan_access.json")
    monkeypatch.setattr(paths, "SHARE_LINKS_FILE", tmp_path / "share_links.json")
    monkeypatch.setattr(paths, "USERS_FILE", tmp_path / "users.json")
    monkeypatch.setattr(paths, "LOCAL_STORE_FILE", tmp_path / "local_meals.json")
    web_observers.clear()
    yield tmp_path
    web_observers.clear()
