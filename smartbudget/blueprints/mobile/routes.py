from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from flask import Blueprint, current_app, jsonify, redirect, request
from flask_login import login_required, current_user
from ...errors import ApiError
from ...services import code_store, issue_token

mobile_bp = Blueprint("mobile", __name__, url_prefix="/api/mobile")


def _with_code(url, code):
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True) + [("code", code)]
    return urlunsplit(parts._replace(query=urlencode(query)))


@mobile_bp.route("/finish", methods=["GET"])
@login_required
def finish():
    target = request.args.get("redirect") or ""
    if not target.startswith(current_app.config["MOBILE_REDIRECT_PREFIX"]):
        current_app.logger.warning("Invalid mobile redirect %r", target)
        raise ApiError("Invalid redirect")

    code = code_store().issue(current_user.id, current_user.email)
    current_app.logger.info("Issued mobile sign-in code for %s", current_user.email)
    return redirect(_with_code(target, code))


@mobile_bp.route("/exchange", methods=["GET"])
def exchange():
    code = request.args.get("code")
    if not code:
        raise ApiError("code required")

    entry = code_store().consume(code)
    token = issue_token(entry["sub"], entry["email"])
    return jsonify({"token": token, "user": {"id": entry["sub"], "email": entry["email"]}})
