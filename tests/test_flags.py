import pytest

from sake.flags import RunFlags, ServerFlags, SetRunFlags, TaskFlags


def test_list_defaults_are_not_shared():
    first = RunFlags()
    second = RunFlags()
    first.servers.append("web")
    first.tags.append("prod")
    assert second.servers == []
    assert second.tags == []


def test_server_flags_keep_given_values():
    flags = ServerFlags(tags=["prod"], regex="web-.*", invert=True)
    assert flags.tags == ["prod"]
    assert flags.regex == "web-.*"
    assert flags.invert is True
    assert flags.edit is False


def test_task_flags_headers_independent():
    a = TaskFlags()
    b = TaskFlags()
    a.headers.append("name")
    assert b.headers == []


@pytest.mark.parametrize("limit", [-1, 2**32])
def test_run_flags_limit_out_of_range(limit):
    with pytest.raises(ValueError):
        RunFlags(limit=limit)


@pytest.mark.parametrize("limit_p", [-1, 256])
def test_run_flags_limit_p_out_of_range(limit_p):
    with pytest.raises(ValueError):
        RunFlags(limit_p=limit_p)


def test_run_flags_limits_at_bounds_are_kept():
    flags = RunFlags(limit=2**32 - 1, limit_p=255)
    assert flags.limit == 2**32 - 1
    assert flags.limit_p == 255


def test_set_run_flags_equality():
    assert SetRunFlags(parallel=True) == SetRunFlags(parallel=True)
    assert SetRunFlags(parallel=True) != SetRunFlags()