"""
Unit tests for Flask route handlers.

Tests individual route functions with a mocked service layer to ensure
proper request handling, response formatting, and error handling.
"""

import pytest
from unittest.mock import patch, MagicMock

from key_codec import subkey


class TestGetListItems:
    """Test GET /api/lists/<list_id>/items."""

    @patch("api_routes.list_order_service")
    def test_returns_items_in_order(self, mock_service, client):
        first, second = MagicMock(), MagicMock()
        first.to_dict.return_value = {"list_item_id": 1, "order_position": "V"}
        second.to_dict.return_value = {"list_item_id": 2, "order_position": "W"}
        mock_service.get_ordered_items.return_value = [first, second]

        response = client.get("/api/lists/7/items")

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert [item["list_item_id"] for item in data["items"]] == [1, 2]
        mock_service.get_ordered_items.assert_called_once_with(7)


class TestAddListItem:
    """Test POST /api/lists/<list_id>/items."""

    @patch("api_routes.list_order_service")
    def test_add_item(self, mock_service, client):
        item = MagicMock()
        item.to_dict.return_value = {"list_item_id": 12, "label": "Encore"}
        mock_service.append_item.return_value = (True, "Item added successfully", item)

        response = client.post("/api/lists/7/items", json={"label": "  Encore ", "changed_by": "ana"})

        assert response.status_code == 201
        assert response.get_json()["item"]["list_item_id"] == 12
        mock_service.append_item.assert_called_once_with(7, "Encore", changed_by="ana")

    @patch("api_routes.list_order_service")
    def test_add_item_requires_label(self, mock_service, client):
        response = client.post("/api/lists/7/items", json={"label": ""})

        assert response.status_code == 400
        assert response.get_json()["error"] == "label is required"
        mock_service.append_item.assert_not_called()

    def test_add_item_without_body(self, client):
        response = client.post("/api/lists/7/items")
        assert response.status_code == 400

    def test_add_item_non_string_label(self, client):
        response = client.post("/api/lists/7/items", json={"label": 5})

        assert response.status_code == 400
        assert response.get_json()["error"] == "label is required"

    def test_add_item_list_body(self, client):
        response = client.post("/api/lists/7/items", json=["Encore"])

        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"


class TestUpdateListItem:
    """Test PATCH /api/lists/<list_id>/items/<item_id>."""

    @patch("api_routes.list_order_service")
    def test_rename(self, mock_service, client):
        item = MagicMock()
        item.to_dict.return_value = {"list_item_id": 3, "label": "Finale"}
        mock_service.rename_item.return_value = (True, "Item updated successfully", item)

        response = client.patch("/api/lists/7/items/3", json={"label": " Finale", "changed_by": "ana"})

        assert response.status_code == 200
        assert response.get_json()["item"]["label"] == "Finale"
        mock_service.rename_item.assert_called_once_with(7, 3, "Finale", changed_by="ana")

    @patch("api_routes.list_order_service")
    def test_rename_not_found(self, mock_service, client):
        mock_service.rename_item.return_value = (False, "Item 3 not found in list 7", None)

        response = client.patch("/api/lists/7/items/3", json={"label": "Finale"})

        assert response.status_code == 404

    @patch("api_routes.list_order_service")
    def test_rename_requires_label(self, mock_service, client):
        response = client.patch("/api/lists/7/items/3", json={"label": ["Finale"]})

        assert response.status_code == 400
        mock_service.rename_item.assert_not_called()


class TestDeleteListItem:
    """Test DELETE /api/lists/<list_id>/items/<item_id>."""

    @patch("api_routes.list_order_service")
    def test_delete(self, mock_service, client):
        mock_service.remove_item.return_value = (True, "Item 3 removed", None)

        response = client.delete("/api/lists/7/items/3")

        assert response.status_code == 200
        assert response.get_json()["success"] is True
        mock_service.remove_item.assert_called_once_with(7, 3, changed_by="system")

    @patch("api_routes.list_order_service")
    def test_delete_not_found(self, mock_service, client):
        mock_service.remove_item.return_value = (False, "Item 3 not found in list 7", None)

        response = client.delete("/api/lists/7/items/3")

        assert response.status_code == 404


class TestMoveListItem:
    """Test POST /api/lists/<list_id>/items/<item_id>/move."""

    @patch("api_routes.list_order_service")
    def test_move(self, mock_service, client):
        mock_service.move_item.return_value = (True, "Item 3 moved", "X0abc")

        response = client.post("/api/lists/7/items/3/move", json={"to_id": 5})

        assert response.status_code == 200
        assert response.get_json()["order_position"] == "X0abc"
        mock_service.move_item.assert_called_once_with(7, 3, 5, changed_by="system")

    @patch("api_routes.list_order_service")
    def test_move_not_found(self, mock_service, client):
        mock_service.move_item.return_value = (False, "Item 3 not found in list 7", None)

        response = client.post("/api/lists/7/items/3/move", json={"to_id": 5})

        assert response.status_code == 404
        assert response.get_json()["success"] is False

    @patch("api_routes.list_order_service")
    def test_move_invalid_target(self, mock_service, client):
        response = client.post("/api/lists/7/items/3/move", json={"to_id": "abc"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "to_id must be a valid integer"
        mock_service.move_item.assert_not_called()

    @patch("api_routes.list_order_service")
    def test_move_service_exception(self, mock_service, client):
        mock_service.move_item.side_effect = Exception("boom")

        response = client.post("/api/lists/7/items/3/move", json={"to_id": 5})

        assert response.status_code == 500
        assert "boom" in response.get_json()["error"]


class TestMoveListItemTo:
    """Test POST /api/lists/<list_id>/items/<item_id>/move_to."""

    @patch("api_routes.list_order_service")
    def test_move_after(self, mock_service, client):
        mock_service.move_item_to.return_value = (True, "Item 3 moved after item 5", "Y0abc")

        response = client.post("/api/lists/7/items/3/move_to", json={"to_id": 5, "side": "after"})

        assert response.status_code == 200
        mock_service.move_item_to.assert_called_once_with(7, 3, 5, "after", changed_by="system")

    @patch("api_routes.list_order_service")
    def test_invalid_side(self, mock_service, client):
        response = client.post("/api/lists/7/items/3/move_to", json={"to_id": 5, "side": "below"})

        assert response.status_code == 400
        mock_service.move_item_to.assert_not_called()

    @pytest.mark.parametrize("side", [["before"], {"side": "after"}, 1])
    @patch("api_routes.list_order_service")
    def test_non_string_side(self, mock_service, side, client):
        response = client.post("/api/lists/7/items/3/move_to", json={"to_id": 5, "side": side})

        assert response.status_code == 400
        assert response.get_json()["error"].startswith("side must be one of")
        mock_service.move_item_to.assert_not_called()

    @patch("api_routes.list_order_service")
    def test_list_body(self, mock_service, client):
        response = client.post("/api/lists/7/items/3/move_to", json=[5, "after"])

        assert response.status_code == 400
        mock_service.move_item_to.assert_not_called()

    @patch("api_routes.list_order_service")
    def test_bound_error_is_bad_request(self, mock_service, client):
        mock_service.move_item_to.return_value = (False, "Invalid bound order: 'W' must be < 'W'", None)

        response = client.post("/api/lists/7/items/3/move_to", json={"to_id": 5, "side": "before"})

        assert response.status_code == 400


class TestInsertListItemBefore:
    """Test POST /api/lists/<list_id>/items/<item_id>/insert_before."""

    @patch("api_routes.list_order_service")
    def test_insert_before(self, mock_service, client):
        mock_service.insert_item_before.return_value = (True, "Item 3 moved before item 1", "G0abc")

        response = client.post("/api/lists/7/items/3/insert_before", json={"before_id": 1})

        assert response.status_code == 200
        mock_service.insert_item_before.assert_called_once_with(7, 3, 1, changed_by="system")

    @patch("api_routes.list_order_service")
    def test_insert_without_body_appends(self, mock_service, client):
        mock_service.insert_item_before.return_value = (True, "Item 3 moved to the end", "Z0abc")

        response = client.post("/api/lists/7/items/3/insert_before")

        assert response.status_code == 200
        mock_service.insert_item_before.assert_called_once_with(7, 3, None, changed_by="system")

    @patch("api_routes.list_order_service")
    def test_insert_list_body(self, mock_service, client):
        response = client.post("/api/lists/7/items/3/insert_before", json=[1])

        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"
        mock_service.insert_item_before.assert_not_called()

    @patch("api_routes.list_order_service")
    def test_insert_invalid_anchor(self, mock_service, client):
        response = client.post("/api/lists/7/items/3/insert_before", json={"before_id": -4})

        assert response.status_code == 400
        assert response.get_json()["error"] == "before_id must be a positive integer"


class TestGenerateKeyBetween:
    """Test POST /api/keys/between."""

    def test_key_between_bounds(self, client):
        response = client.post("/api/keys/between", json={"a": "V", "b": "X"})

        assert response.status_code == 200
        key = response.get_json()["key"]
        assert "V" < key < "X"
        assert subkey(key) == "W"

    def test_unbounded(self, client):
        response = client.post("/api/keys/between", json={})

        assert response.status_code == 200
        assert subkey(response.get_json()["key"]) == "V"

    def test_bounds_out_of_order(self, client):
        response = client.post("/api/keys/between", json={"a": "X", "b": "V"})

        assert response.status_code == 400
        assert response.get_json()["error"].startswith("Invalid bound order")

    def test_malformed_bound(self, client):
        response = client.post("/api/keys/between", json={"a": "V W"})

        assert response.status_code == 400
        assert "Validation error" in response.get_json()["error"]

    @pytest.mark.parametrize("payload,field", [
        ({"a": 5, "b": None}, "a"),
        ({"a": "V", "b": ["X"]}, "b"),
        ({"a": {"key": "V"}}, "a"),
    ])
    def test_non_string_bound(self, payload, field, client):
        response = client.post("/api/keys/between", json=payload)

        assert response.status_code == 400
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == f"{field} must be a string or null"

    def test_list_body(self, client):
        response = client.post("/api/keys/between", json=["V", "X"])

        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"


class TestErrorHandlers:
    """Test JSON error handlers."""

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.get_json()["success"] is False

    def test_wrong_method(self, client):
        response = client.delete("/api/keys/between")
        assert response.status_code == 405
