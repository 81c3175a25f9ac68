import pytest

from expense_api.app import create_app
from expense_core.services import ExpenseManager
from expense_core.storage import ExpenseStorage


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "expenses.json"


@pytest.fixture
def storage(store_path):
    return ExpenseStorage(store_path)


@pytest.fixture
def manager(storage):
    return ExpenseManager(storage)


@pytest.fixture
def frontend_dir(tmp_path):
    assets = tmp_path / "frontend"
    assets.mkdir()
    (assets / "index.html").write_text("<html><body>expenses</body></html>", encoding="utf-8")
    (assets / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    (assets / "app.js").write_text("const API_BASE = '/api';", encoding="utf-8")
    return assets


@pytest.fixture
def app(tmp_path, frontend_dir):
    app = create_app(tmp_path / "data", frontend_dir)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client
