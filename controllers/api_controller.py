from flask import Blueprint, request, jsonify

from utils.actions import handle_set_role, http_status
from utils.auth import role_required

api_bp = Blueprint("api", __name__, url_prefix="/api")


@api_bp.route("/set-role", methods=["POST"])
@role_required("admin")
def set_role():
    payload = request.get_json(silent=True) or {}
    result = handle_set_role(payload.get("uid"), payload.get("role"))
    return jsonify(result), http_status(result)
