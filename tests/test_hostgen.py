import os

import pytest

from sake.errors import HostRangeError, InventoryEvalFailed
from sake.hostgen import evaluate_inventory, evaluate_range


@pytest.mark.parametrize(
    "command, wanted",
    [
        ("echo 192.168.0.1", ["192.168.0.1"]),
        ('echo "192.168.0.1 192.168.0.2"', ["192.168.0.1", "192.168.0.2"]),
        ('printf "192.168.0.1\\n192.168.0.2"', ["192.168.0.1", "192.168.0.2"]),
        ('printf "192.168.0.1\\t192.168.0.2"', ["192.168.0.1", "192.168.0.2"]),
    ],
)
def test_evaluate_inventory(command, wanted):
    assert evaluate_inventory("", command, [], []) == wanted


def test_evaluate_inventory_passes_envs():
    hosts = evaluate_inventory("", 'echo "$SAKE_A $SAKE_B"', ["SAKE_A=one"], ["SAKE_B=two"])
    assert hosts == ["one", "two"]


def test_evaluate_inventory_user_env_overrides_server_env():
    hosts = evaluate_inventory("", 'echo "$SAKE_A"', ["SAKE_A=one"], ["SAKE_A=two"])
    assert hosts == ["two"]


def test_evaluate_inventory_runs_in_context_dir(tmp_path):
    context = str(tmp_path / "sake.yaml")
    hosts = evaluate_inventory(context, "pwd -P", [], [])
    assert hosts == [os.path.realpath(str(tmp_path))]


def test_evaluate_inventory_failure():
    with pytest.raises(InventoryEvalFailed) as info:
        evaluate_inventory("", "echo oops; exit 3", [], [])
    assert "oops" in str(info.value)


@pytest.mark.parametrize(
    "pattern, wanted",
    [
        ("192.168.0.1", ["192.168.0.1"]),
        ("192.168.0.[1:2]", ["192.168.0.1", "192.168.0.2"]),
        ("192.168.0.[1:2].33", ["192.168.0.1.33", "192.168.0.2.33"]),
        (
            "192.168.0.[09:12].33",
            ["192.168.0.09.33", "192.168.0.10.33", "192.168.0.11.33", "192.168.0.12.33"],
        ),
        ("192.168.0.[1:4:2].33", ["192.168.0.1.33", "192.168.0.3.33"]),
        ("192-[01:4:2].33", ["192-01.33", "192-03.33"]),
        ("192.[0:1].0.[2:3]", ["192.0.0.2", "192.1.0.2", "192.0.0.3", "192.1.0.3"]),
    ],
)
def test_evaluate_range(pattern, wanted):
    assert evaluate_range(pattern) == wanted


@pytest.mark.parametrize(
    "pattern",
    ["192.[2:1].0", "192.[0].0", "192.[0.0", "192.[1:2:1:2]"],
)
def test_evaluate_range_malformed(pattern):
    with pytest.raises(HostRangeError):
        evaluate_range(pattern)


def test_evaluate_range_count_matches_product_of_ranges():
    hosts = evaluate_range("h[1:3]-[1:4]")
    assert len(hosts) == 12
    assert len(set(hosts)) == 12
    assert all(h.startswith("h") for h in hosts)


def test_evaluate_range_padded_values_keep_width():
    hosts = evaluate_range("web[001:3]")
    assert hosts == ["web001", "web002", "web003"]