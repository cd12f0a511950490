"""
HTTP facade for the dashboard.

`create_app()` wires one platform profile and one command executor into the
reporters and operations, then exposes them as a small JSON API next to the
static dashboard files.
"""
from __future__ import annotations

import logging
import platform
import time
from dataclasses import dataclass
from typing import Optional

import psutil
from flask import Blueprint, Flask, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import MethodNotAllowed, NotFound

from .config import Settings
from .dispatcher import CommandDispatcher
from .errors import InvalidActionError, InvalidPackageNameError
from .executor import CommandExecutor
from .metrics import MetricReporter
from .packages import PackageManager
from .platforms import PlatformProfile, detect
from .services import ServiceLister

logger = logging.getLogger(__name__)

EXTENSION = "samsara_hub"

# Pages and assets with fixed locations inside the public directory
PAGES = {
    "/": "index.html",
    "/index.html": "index.html",
    "/docs": "docs.html",
    "/forums": "forums.html",
}


@dataclass
class Hub:
    profile: PlatformProfile
    settings: Settings
    metrics: MetricReporter
    packages: PackageManager
    services: ServiceLister
    dispatcher: CommandDispatcher


def hub() -> Hub:
    return current_app.extensions[EXTENSION]


def _error(message: str, status: int):
    return jsonify({"error": message}), status


api = Blueprint("api", __name__)
pages = Blueprint("pages", __name__)


@api.route("/api/system/stats", methods=["GET"])
def system_stats():
    try:
        stats = hub().metrics.collect()
    except Exception:
        current_app.logger.exception("Failed to fetch system stats")
        return _error("Failed to fetch system stats", 500)
    return jsonify(stats.to_dict())


@api.route("/api/system/command", methods=["POST"])
def system_command():
    body = request.get_json(silent=True)
    command = body.get("command") if isinstance(body, dict) else None
    try:
        action = hub().dispatcher.execute(command)
    except InvalidActionError:
        return _error("Invalid command", 400)
    except Exception:
        current_app.logger.exception("Failed to execute command %r", command)
        return _error("Failed to execute command", 500)
    return jsonify({"success": True, "command": action.value})


@api.route("/api/packages/list", methods=["GET"])
def packages_list():
    try:
        records = hub().packages.list()
    except Exception:
        current_app.logger.exception("Failed to fetch packages")
        return _error("Failed to fetch packages", 500)
    return jsonify([record.to_dict() for record in records])


def _package_name() -> object:
    body = request.get_json(silent=True)
    return body.get("packageName") if isinstance(body, dict) else None


@api.route("/api/packages/install", methods=["POST"])
def packages_install():
    name = _package_name()
    try:
        hub().packages.install(name)
    except InvalidPackageNameError:
        return _error("Invalid package name", 400)
    except Exception:
        current_app.logger.exception("Failed to install package %r", name)
        return _error("Failed to install package", 500)
    return jsonify({"success": True, "package": name})


@api.route("/api/packages/uninstall", methods=["POST"])
def packages_uninstall():
    name = _package_name()
    try:
        hub().packages.uninstall(name)
    except InvalidPackageNameError:
        return _error("Invalid package name", 400)
    except Exception:
        current_app.logger.exception("Failed to uninstall package %r", name)
        return _error("Failed to uninstall package", 500)
    return jsonify({"success": True, "package": name})


@api.route("/api/services/list", methods=["GET"])
def services_list():
    try:
        names = hub().services.list()
    except Exception:
        current_app.logger.exception("Failed to fetch services")
        return _error("Failed to fetch services", 500)
    return jsonify(names)


def _app_version() -> Optional[str]:
    from importlib import metadata

    try:
        return metadata.version("samsara-hub")
    except metadata.PackageNotFoundError:
        return None


def _boot_time() -> Optional[float]:
    # /proc/stat is not readable for apps on recent Android
    try:
        return psutil.boot_time()
    except (OSError, psutil.Error) as e:
        logger.debug("Boot time unavailable: %s", e)
        return None


@api.route("/api/system/info", methods=["GET"])
def system_info():
    profile = hub().profile
    boot_time = _boot_time()
    try:
        info = {
            **profile.to_dict(),
            "hostname": platform.node(),
            "kernel": platform.release(),
            "arch": platform.machine(),
            "cores": psutil.cpu_count(logical=True),
            "bootTime": int(boot_time) if boot_time is not None else None,
            "uptimeSeconds": int(time.time() - boot_time) if boot_time is not None else None,
            "python": platform.python_version(),
            "version": _app_version(),
        }
    except Exception:
        current_app.logger.exception("Failed to fetch system info")
        return _error("Failed to fetch system info", 500)
    return jsonify(info)


@api.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "platform": hub().profile.platform.value})


@pages.route("/", methods=["GET"])
@pages.route("/index.html", methods=["GET"])
@pages.route("/docs", methods=["GET"])
@pages.route("/forums", methods=["GET"])
def page():
    return send_from_directory(hub().settings.public_dir, PAGES[request.path])


@pages.route("/favicon.ico", methods=["GET"])
def favicon():
    return "", 204


@pages.route("/<path:asset>", methods=["GET"])
def static_asset(asset: str):
    # send_from_directory also rejects traversal; ".." is refused outright
    if ".." in asset:
        raise NotFound()
    return send_from_directory(hub().settings.public_dir, asset)


def _not_found(exc: NotFound):
    return "Not Found", 404, {"Content-Type": "text/plain; charset=utf-8"}


def _method_not_allowed(exc: MethodNotAllowed):
    return _error("Method not allowed", 405)


def create_app(
    profile: Optional[PlatformProfile] = None,
    executor: Optional[CommandExecutor] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    """Flask app factory; pass a profile/executor to run against a fake host."""
    settings = settings or Settings.from_env()
    profile = profile or detect()
    executor = executor or CommandExecutor(timeout=settings.command_timeout)

    app = Flask(__name__, static_folder=None)
    app.json.sort_keys = False
    app.extensions[EXTENSION] = Hub(
        profile=profile,
        settings=settings,
        metrics=MetricReporter(profile, executor),
        packages=PackageManager(profile, executor, timeout=settings.package_timeout),
        services=ServiceLister(profile, executor),
        dispatcher=CommandDispatcher(profile, executor),
    )
    app.register_blueprint(api)
    app.register_blueprint(pages)
    app.register_error_handler(NotFound, _not_found)
    app.register_error_handler(MethodNotAllowed, _method_not_allowed)
    logger.debug("App created for %s (public dir %s)", profile.platform.value, settings.public_dir)
    return app
