import json
import sys

import pytest
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException

from poolwright.main import main

from .conftest import make_cluster, make_pool


@pytest.fixture
def store(mocker):
    mock_store_cls = mocker.patch("poolwright.main.KubernetesRecordStore")
    store = mock_store_cls.return_value
    store.get_cluster_deployment.return_value = make_cluster(version="4.7.2")
    store.get_machine_pool.return_value = make_pool("infra", zones=["us-central1-a"])
    store.list_leases.return_value = []
    return store


def _run(mocker, *argv):
    mocker.patch.object(
        sys,
        "argv",
        ["poolwright", "--cluster-deployment", "mycluster",
         "--machine-pool", "mycluster-infra", *argv],
    )
    main()


def test_main_prints_json(mocker, store, capsys):
    mocker.patch(
        "poolwright.actuator.get_credentials", return_value=(object(), "test-project")
    )
    mocker.patch("poolwright.actuator.get_image_id", return_value="abc123-rhcos")

    _run(mocker, "--json", "--namespace", "hive")

    out = json.loads(capsys.readouterr().out)
    assert out[0]["name"] == "abc123-infra-a"
    store.get_machine_pool.assert_called_once_with("hive", "mycluster-infra")


def test_main_exits_when_not_ready(mocker, store):
    mocker.patch(
        "poolwright.actuator.get_credentials", return_value=(object(), "test-project")
    )
    store.get_cluster_deployment.return_value = make_cluster(version="4.3.0")

    with pytest.raises(SystemExit) as exc:
        _run(mocker)
    assert exc.value.code == 2
    store.create_lease.assert_called_once()


def test_main_exits_on_errors(mocker, store):
    mocker.patch("poolwright.actuator.get_credentials", return_value=(object(), None))

    with pytest.raises(SystemExit) as exc:
        _run(mocker)
    assert exc.value.code == 1


def test_main_exits_on_api_errors(mocker, store):
    store.get_cluster_deployment.side_effect = ApiException(
        status=404, reason="Not Found"
    )

    with pytest.raises(SystemExit) as exc:
        _run(mocker)
    assert exc.value.code == 1


def test_main_exits_when_kubernetes_config_missing(mocker):
    mocker.patch(
        "poolwright.main.KubernetesRecordStore",
        side_effect=ConfigException("Invalid kube-config file. No configuration found."),
    )

    with pytest.raises(SystemExit) as exc:
        _run(mocker)
    assert exc.value.code == 1
