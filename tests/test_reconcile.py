"""Line-item rules: merge-or-append, set, remove."""
import pytest

from storefront.errors import NotFound, ValidationFailed
from storefront.reconcile import reconcile, remove_item, set_quantity


def product_ids(items):
    return [item["product_id"] for item in items]


class TestReconcile:

    def test_add_to_empty_cart_appends_line(self):
        assert reconcile([], 1, 2) == [{"product_id": 1, "quantity": 2}]

    def test_add_same_product_twice_sums_quantities(self):
        items = reconcile(reconcile([], 1, 2), 1, 3)
        assert items == [{"product_id": 1, "quantity": 5}]

    def test_new_product_goes_to_the_end(self):
        items = [{"product_id": 7, "quantity": 1}, {"product_id": 3, "quantity": 4}]
        assert product_ids(reconcile(items, 5, 1)) == [7, 3, 5]

    def test_merge_keeps_position_and_other_lines(self):
        items = [
            {"product_id": 1, "quantity": 1},
            {"product_id": 2, "quantity": 2},
            {"product_id": 3, "quantity": 3},
        ]
        assert reconcile(items, 2, 10) == [
            {"product_id": 1, "quantity": 1},
            {"product_id": 2, "quantity": 12},
            {"product_id": 3, "quantity": 3},
        ]

    def test_input_is_not_mutated(self):
        items = [{"product_id": 1, "quantity": 1}]
        reconcile(items, 1, 4)
        reconcile(items, 2, 1)
        assert items == [{"product_id": 1, "quantity": 1}]

    def test_any_sequence_of_adds_keeps_products_unique(self):
        items = []
        for product_id, quantity in [(1, 1), (2, 2), (1, 3), (3, 1), (2, 5), (3, 3), (1, 1)]:
            items = reconcile(items, product_id, quantity)
        assert product_ids(items) == [1, 2, 3]
        assert [item["quantity"] for item in items] == [5, 7, 4]

    @pytest.mark.parametrize("quantity", [0, -1, True, 1.5, "2", None])
    def test_rejects_bad_quantity(self, quantity):
        with pytest.raises(ValidationFailed):
            reconcile([], 1, quantity)


class TestSetQuantity:

    def test_replaces_quantity_outright(self):
        items = [{"product_id": 1, "quantity": 9}, {"product_id": 2, "quantity": 1}]
        assert set_quantity(items, 1, 2) == [
            {"product_id": 1, "quantity": 2},
            {"product_id": 2, "quantity": 1},
        ]

    def test_missing_line_is_not_found(self):
        with pytest.raises(NotFound):
            set_quantity([{"product_id": 1, "quantity": 1}], 2, 3)

    def test_rejects_zero(self):
        with pytest.raises(ValidationFailed):
            set_quantity([{"product_id": 1, "quantity": 1}], 1, 0)


class TestRemoveItem:

    def test_removes_only_matching_line(self):
        items = [{"product_id": 1, "quantity": 1}, {"product_id": 2, "quantity": 2}]
        assert remove_item(items, 1) == [{"product_id": 2, "quantity": 2}]

    def test_removing_last_line_leaves_empty_list(self):
        assert remove_item([{"product_id": 1, "quantity": 1}], 1) == []

    def test_missing_line_is_not_found(self):
        with pytest.raises(NotFound):
            remove_item([{"product_id": 1, "quantity": 1}], 2)

    def test_remove_then_add_starts_fresh(self):
        items = [{"product_id": 1, "quantity": 8}]
        items = reconcile(remove_item(items, 1), 1, 3)
        assert items == [{"product_id": 1, "quantity": 3}]


def test_shopping_scenario():
    items = reconcile([], 1, 2)
    assert items == [{"product_id": 1, "quantity": 2}]

    items = reconcile(items, 1, 3)
    assert items == [{"product_id": 1, "quantity": 5}]

    items = reconcile(items, 2, 1)
    assert product_ids(items) == [1, 2]

    items = remove_item(items, 1)
    assert items == [{"product_id": 2, "quantity": 1}]
