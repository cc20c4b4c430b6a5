import json

from db.store import CATEGORIES_KEY, load_records
from models.category import Category, CategoryKind
from services.categories import CategoryService


class TestCategoryService:
    """Tests for CategoryService."""

    def test_seed_categories_loaded_on_first_run(self, services):
        ids = [c.id for c in services.categories.find_all()]

        assert ids == [c.id for c in services.seed.categories]

    def test_find_all_by_kind(self, services):
        expense = services.categories.find_all(CategoryKind.EXPENSE)
        income = services.categories.find_all(CategoryKind.INCOME)

        assert expense and all(c.kind is CategoryKind.EXPENSE for c in expense)
        assert {c.id for c in income} == {"trabajos", "ventas_reembolsos", "rendimientos"}
        assert len(expense) + len(income) == len(services.categories.find_all())

    def test_find(self, services):
        category = services.categories.find("mercado")

        assert category.name == "Mercado"
        assert category.kind is CategoryKind.EXPENSE

    def test_find_not_found(self, services):
        assert services.categories.find("nope") is None

    def test_user_category_survives_reconcile(self, services):
        """Test that categories added outside the seed are never removed."""
        custom = Category("viajes", "Viajes", CategoryKind.EXPENSE)
        stored = [custom.to_dict()] + [c.to_dict() for c in services.categories.find_all()]
        services.store.set(CATEGORIES_KEY, json.dumps(stored).encode("utf-8"))

        categories = CategoryService(services.store)
        categories.load()
        changed = categories.reconcile(services.seed.categories)

        assert changed is False
        assert categories.find_all()[0] == custom

    def test_missing_blob_starts_empty(self, services):
        services.store.set(CATEGORIES_KEY, b"not json")

        categories = CategoryService(services.store)

        assert categories.load() == []
        assert categories.reconcile(services.seed.categories) is True
        assert len(categories.find_all()) == len(services.seed.categories)

    def test_unreadable_stored_category_survives_reconcile(self, services):
        broken = {"id": "bonos", "name": "Bonos", "kind": "OTRO"}
        services.store.set(CATEGORIES_KEY, json.dumps([broken]).encode("utf-8"))

        categories = CategoryService(services.store)
        categories.load()

        assert categories.reconcile(services.seed.categories) is True
        assert broken in load_records(services.store, CATEGORIES_KEY)
