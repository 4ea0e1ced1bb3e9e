from __future__ import annotations

import logging
from typing import Any

from flask import (
    Blueprint,
    Flask,
    abort,
    current_app,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)

from .config import APP_VERSION, Config
from .external_api import OmdbError, parse_rating, parse_runtime
from .models import WatchedMovie
from .session import NothingSelected, Session, SessionRegistry
from .utils import (
    default_room,
    parse_user_rating,
    sanitize_room,
    serialize_search,
    serialize_session,
    serialize_watched,
    serialize_watchlist,
)

logger = logging.getLogger(__name__)

bp = Blueprint("frate", __name__)

PAGE_ARGS = ("q", "select", "close")


def _registry() -> SessionRegistry:
    return current_app.extensions["frate_sessions"]


def _json_payload() -> dict[str, Any] | None:
    if not request.is_json:
        return None
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _room_from_request(data: dict[str, Any] | None = None) -> str:
    room = request.args.get("room")
    if not room and data:
        room = data.get("room")
    return sanitize_room(room if isinstance(room, str) else None)


def _session_for(room: str) -> Session:
    return _registry().get(room)


def _existing_session(room: str) -> Session:
    # Read-only routes must not create rooms; an unknown room reads as empty.
    return _registry().peek(room) or Session()


def _page_args(args: Any) -> dict[str, str]:
    return {key: args[key] for key in PAGE_ARGS if key in args}


def _room_url(room: str, session: Session) -> str:
    if session.search.query:
        return url_for("frate.room", room=room, q=session.search.query)
    return url_for("frate.room", room=room)


@bp.route("/")
def root() -> Any:
    return redirect(url_for("frate.room", room="new"))


@bp.route("/healthz")
def healthz() -> Any:
    return jsonify({"status": "ok", "version": APP_VERSION})


@bp.route("/r/<room>")
def room(room: str) -> Any:
    if room == "new":
        return redirect(url_for("frate.room", room=default_room()))
    clean_room = sanitize_room(room)
    if not clean_room:
        abort(404)
    if clean_room != room:
        return redirect(url_for("frate.room", room=clean_room, **_page_args(request.args)))
    session = _session_for(room)
    query = request.args.get("q")
    # Only a changed query triggers a lookup, so reloading the page does not.
    if query is not None and query != session.search.query:
        session.set_query(query)
    # Selection toggles, so land on a URL that is safe to reload.
    if request.args.get("close"):
        session.close_movie()
        return redirect(_room_url(room, session))
    if request.args.get("select"):
        session.select_movie(request.args["select"])
        return redirect(_room_url(room, session))
    return render_template(
        "index.html",
        room=room,
        app_version=APP_VERSION,
        search=session.search,
        selected_id=session.selected_id,
        details=session.details,
        details_error=session.details_error,
        watched=list(session.watchlist),
        summary=session.watchlist.summary(),
    )


@bp.route("/r/<room>/watched", methods=["POST"])
def room_add_watched(room: str) -> Any:
    room = sanitize_room(room)
    if not room:
        abort(404)
    rating = parse_user_rating(request.form.get("user_rating"))
    if rating is None:
        abort(400)
    try:
        _session_for(room).add_selected(rating)
    except NothingSelected:
        abort(400)
    except OmdbError as exc:
        logger.error("Could not add selected movie in room %s: %s", room, exc)
        abort(502)
    return redirect(url_for("frate.room", room=room))


@bp.route("/r/<room>/watched/<imdb_id>/delete", methods=["POST"])
def room_delete_watched(room: str, imdb_id: str) -> Any:
    room = sanitize_room(room)
    if not room:
        abort(404)
    _session_for(room).remove_watched(imdb_id)
    return redirect(url_for("frate.room", room=room))


@bp.route("/api/state")
def api_state() -> Any:
    room = _room_from_request()
    if not room:
        return jsonify({"error": "missing_room"}), 400
    return jsonify(serialize_session(_existing_session(room)))


@bp.route("/api/search")
def api_search() -> Any:
    room = _room_from_request()
    if not room:
        return jsonify({"error": "missing_room"}), 400
    session = _session_for(room)
    session.set_query(request.args.get("q", ""))
    return jsonify(serialize_search(session))


@bp.route("/api/select", methods=["POST"])
def api_select() -> Any:
    data = _json_payload()
    if data is None:
        return jsonify({"error": "invalid_payload"}), 400
    room = _room_from_request(data)
    if not room:
        return jsonify({"error": "missing_room"}), 400
    imdb_id = data.get("imdb_id")
    if not imdb_id or not isinstance(imdb_id, str):
        return jsonify({"error": "missing_imdb_id"}), 400
    session = _session_for(room)
    session.select_movie(imdb_id)
    return jsonify(serialize_session(session))


@bp.route("/api/close", methods=["POST"])
def api_close() -> Any:
    data = _json_payload()
    if data is None:
        return jsonify({"error": "invalid_payload"}), 400
    room = _room_from_request(data)
    if not room:
        return jsonify({"error": "missing_room"}), 400
    session = _session_for(room)
    session.close_movie()
    return jsonify(serialize_session(session))


@bp.route("/api/watched", methods=["GET"])
def api_watched() -> Any:
    room = _room_from_request()
    if not room:
        return jsonify({"error": "missing_room"}), 400
    return jsonify(serialize_watchlist(_existing_session(room)))


@bp.route("/api/watched", methods=["POST"])
def api_add_watched() -> Any:
    data = _json_payload()
    if data is None:
        return jsonify({"error": "invalid_payload"}), 400
    room = _room_from_request(data)
    if not room:
        return jsonify({"error": "missing_room"}), 400
    rating = parse_user_rating(data.get("user_rating"))
    if rating is None:
        return jsonify({"error": "invalid_rating"}), 400
    session = _session_for(room)
    if data.get("imdb_id"):
        title = data.get("title")
        if not title:
            return jsonify({"error": "missing_title"}), 400
        movie = WatchedMovie(
            imdb_id=str(data["imdb_id"]),
            title=str(title),
            poster=data.get("poster"),
            imdb_rating=parse_rating(data.get("imdb_rating")),
            user_rating=rating,
            runtime=parse_runtime(data.get("runtime")),
        )
        session.add_watched(movie)
    else:
        try:
            movie = session.add_selected(rating)
        except NothingSelected:
            return jsonify({"error": "nothing_selected"}), 400
        except OmdbError as exc:
            return jsonify({"error": "omdb_fetch_failed", "detail": str(exc)}), 502
    return jsonify({"status": "ok", "movie": serialize_watched(movie), **serialize_watchlist(session)})


@bp.route("/api/watched", methods=["DELETE"])
def api_delete_watched() -> Any:
    data = _json_payload()
    if data is None:
        return jsonify({"error": "invalid_payload"}), 400
    room = _room_from_request(data)
    if not room:
        return jsonify({"error": "missing_room"}), 400
    imdb_id = data.get("imdb_id")
    if not imdb_id:
        return jsonify({"error": "missing_imdb_id"}), 400
    removed = _session_for(room).remove_watched(str(imdb_id))
    return jsonify({"status": "ok", "removed": removed})


def create_app(config: dict[str, Any] | None = None) -> Flask:
    flask_app = Flask(__name__)
    flask_app.config.from_object(Config)
    if config:
        flask_app.config.update(config)

    logging.basicConfig(
        level=flask_app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    flask_app.extensions["frate_sessions"] = SessionRegistry(
        {
            "api_key": flask_app.config["OMDB_API_KEY"],
            "base_url": flask_app.config["OMDB_URL"],
            "user_agent": flask_app.config["USER_AGENT"],
            "timeout": flask_app.config["REQUEST_TIMEOUT"],
        }
    )
    flask_app.register_blueprint(bp)
    return flask_app


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
