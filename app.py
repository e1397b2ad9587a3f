from flask import Flask, jsonify
import os
import logging
from dotenv import load_dotenv

from api_routes import (
    get_list_items,
    add_list_item,
    update_list_item,
    delete_list_item,
    move_list_item,
    move_list_item_to,
    insert_list_item_before,
    generate_key_between_ajax,
)

load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()  # Log to stdout (captured by Gunicorn)
    ]
)

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Configure Flask to handle trailing slashes consistently
app.url_map.strict_slashes = False

app.add_url_rule("/api/lists/<int:list_id>/items", "get_list_items", get_list_items, methods=["GET"])
app.add_url_rule("/api/lists/<int:list_id>/items", "add_list_item", add_list_item, methods=["POST"])
app.add_url_rule(
    "/api/lists/<int:list_id>/items/<int:item_id>",
    "update_list_item",
    update_list_item,
    methods=["PATCH"],
)
app.add_url_rule(
    "/api/lists/<int:list_id>/items/<int:item_id>",
    "delete_list_item",
    delete_list_item,
    methods=["DELETE"],
)
app.add_url_rule(
    "/api/lists/<int:list_id>/items/<int:item_id>/move",
    "move_list_item",
    move_list_item,
    methods=["POST"],
)
app.add_url_rule(
    "/api/lists/<int:list_id>/items/<int:item_id>/move_to",
    "move_list_item_to",
    move_list_item_to,
    methods=["POST"],
)
app.add_url_rule(
    "/api/lists/<int:list_id>/items/<int:item_id>/insert_before",
    "insert_list_item_before",
    insert_list_item_before,
    methods=["POST"],
)
app.add_url_rule("/api/keys/between", "generate_key_between_ajax", generate_key_between_ajax, methods=["POST"])


@app.errorhandler(404)
def not_found_error(error):  # pylint: disable=unused-argument
    return jsonify({"success": False, "error": "Not found"}), 404


@app.errorhandler(405)
def method_not_allowed_error(error):  # pylint: disable=unused-argument
    return jsonify({"success": False, "error": "Method not allowed"}), 405


@app.errorhandler(Exception)
def handle_exception(error):
    """Catch all other unhandled exceptions"""
    logger.error(f"Unhandled exception: {error}", exc_info=True)
    return jsonify({"success": False, "error": f"An unexpected error occurred: {str(error)}"}), 500


if __name__ == "__main__":
    app.run(
        debug=True, port=5001, host="127.0.0.1", use_reloader=True, use_debugger=True
    )
