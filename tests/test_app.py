from conftest import FakeExecutor
from samples import DF, DPKG, FREE, SYSTEMCTL, TOP_LINUX, dpkg_lines
from samsara_hub.platforms import Platform

HOST_OUTPUTS = {
    "uptime": "up 1 day, 2 hours\n",
    "cat": "45000\n",
    "top": TOP_LINUX,
    "free": FREE,
    "df": DF,
    "dpkg": DPKG,
    "systemctl": SYSTEMCTL,
    "echo": "ok\n",
    "apt-get": "",
}


def test_health(make_client):
    rv = make_client(FakeExecutor()).get("/health")
    assert rv.status_code == 200
    assert rv.get_json() == {"status": "ok", "platform": "linux"}


def test_system_stats(make_client):
    rv = make_client(FakeExecutor(HOST_OUTPUTS)).get("/api/system/stats")
    assert rv.status_code == 200
    assert rv.get_json() == {
        "uptime": "up 1 day, 2 hours",
        "temperature": "45.0C",
        "cpuUsage": "3.1%",
        "memoryUsage": "512/1024MB (50.0%)",
        "diskUsage": "3.2G/10G (32%)",
    }


def test_system_stats_with_broken_tools(make_client):
    for platform in Platform:
        rv = make_client(FakeExecutor(fail=True), platform).get("/api/system/stats")
        assert rv.status_code == 200
        assert set(rv.get_json().values()) == {"N/A"}


def test_system_info_shape(make_client):
    rv = make_client(FakeExecutor(), Platform.ALPINE).get("/api/system/info")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["platform"] == "alpine"
    assert data["packageManager"] == "apk"
    for key in ["hostname", "cores", "bootTime", "uptimeSeconds", "python", "version"]:
        assert key in data


def test_command(make_client):
    executor = FakeExecutor(HOST_OUTPUTS)
    rv = make_client(executor).post("/api/system/command", json={"command": "restart"})
    assert rv.status_code == 200
    assert rv.get_json() == {"success": True, "command": "restart"}
    assert executor.calls == [["echo", "Restart command received"]]


def test_invalid_command_is_400(make_client):
    executor = FakeExecutor(HOST_OUTPUTS)
    client = make_client(executor)
    for body in ({"command": "reboot"}, {}, ["restart"]):
        rv = client.post("/api/system/command", json=body)
        assert rv.status_code == 400
        assert rv.get_json() == {"error": "Invalid command"}
    rv = client.post("/api/system/command", data="not json", content_type="application/json")
    assert rv.status_code == 400
    assert executor.calls == []


def test_command_failure_is_500(make_client):
    rv = make_client(FakeExecutor(fail=True)).post("/api/system/command", json={"command": "stop"})
    assert rv.status_code == 500
    assert rv.get_json() == {"error": "Failed to execute command"}


def test_packages_list(make_client):
    rv = make_client(FakeExecutor(HOST_OUTPUTS)).get("/api/packages/list")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data[1] == {"name": "bash", "version": "5.2.15-2", "description": "", "installed": True}


def test_packages_list_is_bounded(make_client):
    rv = make_client(FakeExecutor({"dpkg": dpkg_lines(200)})).get("/api/packages/list")
    assert len(rv.get_json()) == 50


def test_packages_list_failure_is_empty(make_client):
    rv = make_client(FakeExecutor(fail=True)).get("/api/packages/list")
    assert rv.status_code == 200
    assert rv.get_json() == []


def test_install_runs_platform_command(make_client):
    for platform, verb in [
        (Platform.LINUX, ["apt-get", "install", "-y"]),
        (Platform.ALPINE, ["apk", "add"]),
        (Platform.TERMUX, ["pkg", "install", "-y"]),
    ]:
        executor = FakeExecutor({"apt-get": "", "apk": "", "pkg": ""})
        rv = make_client(executor, platform).post("/api/packages/install", json={"packageName": "foo"})
        assert rv.status_code == 200
        assert rv.get_json() == {"success": True, "package": "foo"}
        assert executor.calls == [verb + ["foo"]]


def test_uninstall(make_client):
    executor = FakeExecutor(HOST_OUTPUTS)
    rv = make_client(executor).post("/api/packages/uninstall", json={"packageName": "foo"})
    assert rv.status_code == 200
    assert rv.get_json() == {"success": True, "package": "foo"}
    assert executor.calls == [["apt-get", "remove", "-y", "foo"]]


def test_install_rejects_injection(make_client):
    executor = FakeExecutor(HOST_OUTPUTS)
    client = make_client(executor)
    for body in ({"packageName": "foo; reboot"}, {"packageName": 7}, {}):
        rv = client.post("/api/packages/install", json=body)
        assert rv.status_code == 400
        assert rv.get_json() == {"error": "Invalid package name"}
    assert executor.calls == []


def test_install_failure_is_500_without_detail(make_client):
    rv = make_client(FakeExecutor(fail=True)).post("/api/packages/install", json={"packageName": "foo"})
    assert rv.status_code == 500
    assert rv.get_json() == {"error": "Failed to install package"}


def test_uninstall_failure_is_500(make_client):
    rv = make_client(FakeExecutor(fail=True)).post("/api/packages/uninstall", json={"packageName": "foo"})
    assert rv.status_code == 500
    assert rv.get_json() == {"error": "Failed to uninstall package"}


def test_services_list(make_client):
    rv = make_client(FakeExecutor(HOST_OUTPUTS)).get("/api/services/list")
    assert rv.status_code == 200
    assert rv.get_json() == ["cron.service", "dbus.service", "ssh.service"]


def test_services_failure_is_empty(make_client):
    rv = make_client(FakeExecutor(fail=True)).get("/api/services/list")
    assert rv.status_code == 200
    assert rv.get_json() == []


def test_pages_and_assets(make_client):
    client = make_client(FakeExecutor())
    for path, needle in [
        ("/", b"dashboard"),
        ("/index.html", b"dashboard"),
        ("/docs", b"docs"),
        ("/forums", b"forums"),
        ("/Global.css", b"body"),
        ("/index.js", b"hub"),
        ("/WebUi.svg", b"svg"),
    ]:
        rv = client.get(path)
        assert rv.status_code == 200, path
        assert needle in rv.data
    assert client.get("/Global.css").mimetype == "text/css"
    assert client.get("/WebUi.svg").mimetype == "image/svg+xml"


def test_favicon_is_empty(make_client):
    rv = make_client(FakeExecutor()).get("/favicon.ico")
    assert rv.status_code == 204
    assert rv.data == b""


def test_unknown_path_is_plain_404(make_client):
    client = make_client(FakeExecutor())
    for path in ["/missing.txt", "/api/unknown", "/../secret"]:
        rv = client.get(path)
        assert rv.status_code == 404, path
        assert rv.mimetype == "text/plain"
        assert rv.data == b"Not Found"


def test_wrong_method_is_json(make_client):
    rv = make_client(FakeExecutor()).post("/api/system/stats")
    assert rv.status_code == 405
    assert rv.get_json() == {"error": "Method not allowed"}


def test_system_info_without_boot_time(make_client, monkeypatch):
    import psutil

    def unreadable():
        raise PermissionError(13, "Permission denied: '/proc/stat'")

    monkeypatch.setattr(psutil, "boot_time", unreadable)
    rv = make_client(FakeExecutor(), Platform.TERMUX).get("/api/system/info")
    assert rv.status_code == 200
    data = rv.get_json()
    assert data["platform"] == "termux"
    assert data["bootTime"] is None
    assert data["uptimeSeconds"] is None
