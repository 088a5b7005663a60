import sys

from tunnelclient.resource_url import resource_to_url


def test_plain_resource():
    url = resource_to_url("main.html", None, None, "C:\\app\\client.exe")
    assert url == "res://C:\\app\\client.exe/main.html"


def test_query_only():
    url = resource_to_url("main.html", "a=1&b=2", None, "/opt/client")
    assert url == "res:///opt/client/main.html?a=1&b=2"


def test_fragment_only():
    url = resource_to_url("main.html", None, "section", "/opt/client")
    assert url.endswith("/main.html#section")
    assert "?" not in url


def test_query_and_fragment_order():
    url = resource_to_url("page.html", "x=y", "top", "/bin/prog")
    assert url.index("?x=y") < url.index("#top")
    assert url.endswith("?x=y#top")


def test_empty_query_still_adds_separator():
    url = resource_to_url("page.html", "", None, "/bin/prog")
    assert url.endswith("page.html?")


def test_default_exe_path_is_interpreter():
    url = resource_to_url("page.html")
    assert url == "res://" + (sys.executable or "") + "/page.html"