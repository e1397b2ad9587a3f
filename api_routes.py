"""
API routes for ordered lists.

JSON endpoints for reading a list in order and for the reorder operations
(append, move, move before/after, insert before). Each reorder writes one new
order key onto the moved item and nothing else.
"""

import logging

from flask import request, jsonify

from key_codec import generate_between, InvalidBoundOrderError
from list_orderer import VALID_SIDES
from services.list_order_service import ListOrderService

logger = logging.getLogger(__name__)

# Initialize services
list_order_service = ListOrderService()

NOT_AN_OBJECT = "Request body must be a JSON object"


def _parse_id(value, field_name):
    """Convert a JSON id to int, raising ValueError with a readable message."""
    try:
        parsed = int(value)
    except (ValueError, TypeError):
        raise ValueError(f"{field_name} must be a valid integer")
    if parsed <= 0:
        raise ValueError(f"{field_name} must be a positive integer")
    return parsed


def _parse_label(data):
    label = data.get("label")
    if not isinstance(label, str) or not label.strip():
        raise ValueError("label is required")
    return label.strip()


def _changed_by(data):
    changed_by = data.get("changed_by")
    return changed_by if isinstance(changed_by, str) and changed_by else "system"


def _bad_request(message):
    return jsonify({"success": False, "error": message}), 400


def _failure_response(message):
    if "not found" in message:
        return jsonify({"success": False, "error": message}), 404
    return _bad_request(message)


def get_list_items(list_id):
    """
    GET /api/lists/<list_id>/items

    Returns:
        JSON response with the list's items sorted by order_position
    """
    items = list_order_service.get_ordered_items(list_id)
    return jsonify({
        "success": True,
        "items": [item.to_dict() for item in items]
    }), 200


def add_list_item(list_id):
    """
    POST /api/lists/<list_id>/items

    Request Body:
        - label (str): Label of the new item
        - changed_by (str, optional)

    Returns:
        JSON response with the created item, placed at the end of the list
    """
    try:
        data = request.get_json(silent=True)
        if not data:
            return _bad_request("No data provided")
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        try:
            label = _parse_label(data)
        except ValueError as e:
            return _bad_request(str(e))

        success, message, list_item = list_order_service.append_item(
            list_id, label, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({
            "success": True,
            "message": message,
            "item": list_item.to_dict()
        }), 201

    except Exception as e:
        logger.error(f"Error adding item to list {list_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error adding item: {str(e)}"}), 500


def update_list_item(list_id, item_id):
    """
    PATCH /api/lists/<list_id>/items/<item_id>

    Rename an item. Its position in the list is left alone.

    Request Body:
        - label (str): New label
        - changed_by (str, optional)
    """
    try:
        data = request.get_json(silent=True)
        if not data:
            return _bad_request("No data provided")
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        try:
            label = _parse_label(data)
        except ValueError as e:
            return _bad_request(str(e))

        success, message, list_item = list_order_service.rename_item(
            list_id, item_id, label, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({
            "success": True,
            "message": message,
            "item": list_item.to_dict()
        }), 200

    except Exception as e:
        logger.error(f"Error updating item {item_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error updating item: {str(e)}"}), 500


def delete_list_item(list_id, item_id):
    """
    DELETE /api/lists/<list_id>/items/<item_id>

    Removes the item. The keys of the remaining items are not touched.
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        success, message, _ = list_order_service.remove_item(
            list_id, item_id, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({"success": True, "message": message}), 200

    except Exception as e:
        logger.error(f"Error deleting item {item_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error deleting item: {str(e)}"}), 500


def move_list_item(list_id, item_id):
    """
    POST /api/lists/<list_id>/items/<item_id>/move

    Drop the item onto another item's position.

    Request Body:
        - to_id (int): ID of the item it is dropped onto
    """
    try:
        data = request.get_json(silent=True)
        if not data:
            return _bad_request("No data provided")
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        try:
            to_id = _parse_id(data.get("to_id"), "to_id")
        except ValueError as e:
            return _bad_request(str(e))

        success, message, order_position = list_order_service.move_item(
            list_id, item_id, to_id, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({
            "success": True,
            "message": message,
            "order_position": order_position
        }), 200

    except Exception as e:
        logger.error(f"Error moving item {item_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error moving item: {str(e)}"}), 500


def move_list_item_to(list_id, item_id):
    """
    POST /api/lists/<list_id>/items/<item_id>/move_to

    Request Body:
        - to_id (int): ID of the anchor item
        - side (str): 'before' or 'after'
    """
    try:
        data = request.get_json(silent=True)
        if not data:
            return _bad_request("No data provided")
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        try:
            to_id = _parse_id(data.get("to_id"), "to_id")
        except ValueError as e:
            return _bad_request(str(e))

        side = data.get("side")
        if not isinstance(side, str) or side not in VALID_SIDES:
            return _bad_request(f"side must be one of {sorted(VALID_SIDES)}")

        success, message, order_position = list_order_service.move_item_to(
            list_id, item_id, to_id, side, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({
            "success": True,
            "message": message,
            "order_position": order_position
        }), 200

    except Exception as e:
        logger.error(f"Error moving item {item_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error moving item: {str(e)}"}), 500


def insert_list_item_before(list_id, item_id):
    """
    POST /api/lists/<list_id>/items/<item_id>/insert_before

    Request Body (optional):
        - before_id (int): ID of the item to insert before; omitted or null
          moves the item to the end of the list
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return _bad_request(NOT_AN_OBJECT)

        before_id = data.get("before_id")
        if before_id is not None:
            try:
                before_id = _parse_id(before_id, "before_id")
            except ValueError as e:
                return _bad_request(str(e))

        success, message, order_position = list_order_service.insert_item_before(
            list_id, item_id, before_id, changed_by=_changed_by(data)
        )
        if not success:
            return _failure_response(message)

        return jsonify({
            "success": True,
            "message": message,
            "order_position": order_position
        }), 200

    except Exception as e:
        logger.error(f"Error moving item {item_id}: {e}", exc_info=True)
        return jsonify({"success": False, "error": f"Error moving item: {str(e)}"}), 500


def generate_key_between_ajax():
    """
    POST /api/keys/between

    Request Body:
        - a (str or null): lower bound
        - b (str or null): upper bound

    Returns:
        JSON response with a key strictly between a and b
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return _bad_request(NOT_AN_OBJECT)

    lower, upper = data.get("a"), data.get("b")
    for name, bound in (("a", lower), ("b", upper)):
        if bound is not None and not isinstance(bound, str):
            return _bad_request(f"{name} must be a string or null")

    try:
        key = generate_between(lower, upper)
    except InvalidBoundOrderError as e:
        return _bad_request(str(e))
    except ValueError as e:
        return _bad_request(f"Validation error: {str(e)}")

    return jsonify({"success": True, "key": key}), 200
