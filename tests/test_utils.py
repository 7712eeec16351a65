import os

import pytest

from sake.errors import ConfigNotFound
from sake.utils import (
    any_to_string,
    find_file_in_parent_dirs,
    format_shell,
    get_absolute_path,
    intersection,
    is_digit,
    parse_host_name,
    string_to_bool,
    strip_ansi,
)


@pytest.mark.parametrize(
    "hostname, default_user, default_port, wanted_host, wanted_user, wanted_port",
    [
        ("192.168.0.1", "test", 33, "192.168.0.1", "test", 33),
        ("user@192.168.0.1", "test", 33, "192.168.0.1", "user", 33),
        ("192.168.0.1:44", "test", 33, "192.168.0.1", "test", 44),
        ("user@192.168.0.1:44", "test", 33, "192.168.0.1", "user", 44),
        ("2001:3984:3989::10", "test", 33, "2001:3984:3989::10", "test", 33),
        ("user@2001:3984:3989::10", "test", 33, "2001:3984:3989::10", "user", 33),
        ("[2001:3984:3989::10]:44", "test", 33, "2001:3984:3989::10", "test", 44),
        ("user@[2001:3984:3989::10]:44", "test", 33, "2001:3984:3989::10", "user", 44),
        ("resolved", "test", 33, "resolved", "test", 33),
        ("resolved.com", "test", 33, "resolved.com", "test", 33),
        ("user@resolved", "test", 33, "resolved", "user", 33),
    ],
)
def test_parse_host_name(hostname, default_user, default_port, wanted_host, wanted_user, wanted_port):
    user, host, port = parse_host_name(hostname, default_user, default_port)
    assert host == wanted_host
    assert user == wanted_user
    assert port == wanted_port


def test_parse_host_name_strips_ssh_scheme():
    assert parse_host_name("ssh://user@192.168.0.1", "test", 33) == ("user", "192.168.0.1", 33)


def test_parse_host_name_rejects_slash():
    with pytest.raises(ValueError):
        parse_host_name("host/path", "test", 22)


def test_parse_host_name_rejects_bad_port():
    with pytest.raises(ValueError):
        parse_host_name("192.168.0.1:abc", "test", 22)
    with pytest.raises(ValueError):
        parse_host_name("192.168.0.1:70000", "test", 22)


def test_strip_ansi():
    assert strip_ansi("\x1b[31mred\x1b[0m") == "red"
    assert strip_ansi("plain text") == "plain text"


def test_intersection_keeps_order_of_first():
    assert intersection(["c", "a", "b"], ["b", "c"]) == ["c", "b"]
    assert intersection(["a"], []) == []


def test_format_shell():
    assert format_shell("bash") == "bash -c"
    assert format_shell("/bin/zsh") == "/bin/zsh -c"
    assert format_shell("sh") == "sh -c"
    assert format_shell("node") == "node -e"
    assert format_shell("python3") == "python3 -c"
    assert format_shell("bash -c") == "bash -c"
    assert format_shell("ruby") == "ruby"


def test_any_to_string():
    assert any_to_string(None) == ""
    assert any_to_string(5) == "5"
    assert any_to_string(True) == "true"
    assert any_to_string(False) == "false"
    assert any_to_string("x") == "x"
    assert any_to_string(1.5) == ""


def test_string_to_bool():
    assert string_to_bool(" Yes ") is True
    assert string_to_bool("TRUE") is True
    assert string_to_bool("no") is False
    assert string_to_bool("") is False


def test_is_digit():
    assert is_digit("0123") is True
    assert is_digit("12a") is False
    assert is_digit("") is True


def test_get_absolute_path_relative(tmp_path):
    base = str(tmp_path)
    assert get_absolute_path(base, "lala/land", "x") == os.path.join(base, "lala", "land")
    assert get_absolute_path(base, "./lala/land", "x") == os.path.join(base, "lala", "land")
    assert get_absolute_path(base, "", "name") == os.path.join(base, "name")


def test_get_absolute_path_absolute_untouched(tmp_path):
    assert get_absolute_path(str(tmp_path), "/lala/land", "x") == "/lala/land"


def test_get_absolute_path_home_and_env(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("SAKE_TEST_DIR", "/opt/stuff")
    assert get_absolute_path("/cfg", "~", "x") == str(tmp_path)
    assert get_absolute_path("/cfg", "~/lala", "x") == os.path.join(str(tmp_path), "lala")
    assert get_absolute_path("/cfg", "$SAKE_TEST_DIR/land", "x") == "/opt/stuff/land"


def test_find_file_in_parent_dirs(tmp_path):
    target = tmp_path / "sake-unit-config.yaml"
    target.write_text("")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    found = find_file_in_parent_dirs(str(nested), ["sake-unit-config.yaml"])
    assert found == str(target)


def test_find_file_in_parent_dirs_not_found(tmp_path):
    with pytest.raises(ConfigNotFound) as info:
        find_file_in_parent_dirs(str(tmp_path), ["sake-missing-config-xyz.yaml"])
    assert info.value.names == ["sake-missing-config-xyz.yaml"]