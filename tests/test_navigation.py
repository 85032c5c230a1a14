import pytest
from unittest.mock import MagicMock
from cratedui.navigation import build_url, open_url


@pytest.mark.parametrize("host,url", [
    ("10.0.0.2", "http://10.0.0.2"),
    ("web.test", "http://web.test"),
    ("web.test:8080", "http://web.test:8080"),
])
def test_build_url(host, url):
    assert build_url(host) == url


@pytest.mark.parametrize("host", ["", "   ", "has space", "web:notaport", ":80"])
def test_build_url_rejects_malformed(host):
    assert build_url(host) is None


def test_open_url_calls_opener():
    opener = MagicMock()
    assert open_url("10.0.0.2", opener) is True
    opener.assert_called_once_with("http://10.0.0.2")


def test_open_url_ignores_malformed_target():
    opener = MagicMock()
    assert open_url("bad host", opener) is False
    opener.assert_not_called()


def test_open_url_swallows_browser_failure():
    opener = MagicMock(side_effect=OSError("no browser"))
    assert open_url("10.0.0.2", opener) is False


def test_default_opener_is_webbrowser(mocker):
    mock_open = mocker.patch("webbrowser.open")
    from cratedui.views import container_row
    from cratedui.model import ContainerInfo, NetworkAttachment

    row = container_row(ContainerInfo(id="c1", status="running",
                                      networks=[NetworkAttachment("n1", "10.0.0.2/24")]))
    assert row.activate_address() is True
    mock_open.assert_called_once_with("http://10.0.0.2")
