import socket

from conftest import FakeExecutor, profile_for
from samsara_hub import create_app
from samsara_hub.__main__ import bind_server, main
from samsara_hub.config import Settings
from samsara_hub.platforms import Platform


def _held_port():
    holder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    holder.bind(("127.0.0.1", 0))
    holder.listen(1)
    return holder, holder.getsockname()[1]


def test_bind_server_skips_busy_port():
    holder, busy = _held_port()
    try:
        settings = Settings(base_port=busy, port_attempts=5)
        app = create_app(profile_for(Platform.LINUX), FakeExecutor(), settings)
        server = bind_server(app, settings)
        try:
            assert server.port != busy
            assert busy < server.port <= busy + 4
        finally:
            server.server_close()
    finally:
        holder.close()


def test_main_exits_when_ports_exhausted(monkeypatch, capsys):
    holder, busy = _held_port()
    try:
        monkeypatch.setenv("SAMSARA_PORT", str(busy))
        monkeypatch.setenv("SAMSARA_PORT_ATTEMPTS", "1")
        assert main(["-q"]) == 1
        assert "All candidate ports are currently in use" in capsys.readouterr().err
    finally:
        holder.close()
