import pytest

from poolwright.builder import build_machine_sets, replicas_for_zone, zone_suffix
from poolwright.errors import InvalidInputError
from poolwright.schemas.pool import Taint

ZONES = ["us-central1-a", "us-central1-b", "us-central1-c"]


def _build(**overrides):
    args = dict(
        infra_id="abc123",
        project_id="test-project",
        region="us-central1",
        pool_name="k",
        zones=ZONES,
        instance_type="n1-standard-4",
        replicas=4,
        image_id="abc123-rhcos-image",
        role="worker",
        user_data_secret="worker-user-data",
    )
    args.update(overrides)
    return build_machine_sets(**args)


def test_one_machine_set_per_zone():
    machine_sets = _build()

    assert [ms.name for ms in machine_sets] == [
        "abc123-k-a",
        "abc123-k-b",
        "abc123-k-c",
    ]
    assert [ms.zone for ms in machine_sets] == ZONES
    # 4 replicas over 3 zones
    assert [ms.replicas for ms in machine_sets] == [2, 1, 1]


def test_machine_set_details():
    ms = _build(
        node_labels={"node-role": "infra"},
        taints=[Taint(key="infra", effect="NoSchedule")],
    )[0]

    assert ms.machine_type == "n1-standard-4"
    assert ms.disks[0].type == "pd-ssd"
    assert ms.disks[0].size_gb == 128
    assert ms.disks[0].image == "projects/test-project/global/images/abc123-rhcos-image"
    assert ms.network == "abc123-network"
    assert ms.subnetwork == "abc123-worker-subnet"
    assert ms.service_account_email == "abc123-w@test-project.iam.gserviceaccount.com"
    assert ms.tags == ["abc123-worker"]
    assert ms.user_data_secret == "worker-user-data"
    assert ms.namespace == "openshift-machine-api"
    assert ms.selector["machine.openshift.io/cluster-api-machineset"] == ms.name
    assert ms.node_labels == {"node-role": "infra"}
    assert ms.taints[0].effect == "NoSchedule"


def test_full_pool_names_are_kept():
    ms = _build(pool_name="infra", zones=["us-central1-f"])[0]
    assert ms.name == "abc123-infra-f"
    assert ms.pool_name == "infra"


def test_building_is_deterministic():
    assert _build() == _build()


def test_replica_spread():
    assert [replicas_for_zone(5, 3, i) for i in range(3)] == [2, 2, 1]
    assert [replicas_for_zone(0, 2, i) for i in range(2)] == [0, 0]


def test_zone_suffix():
    assert zone_suffix("us-central1-a", "us-central1") == "a"
    assert zone_suffix("europe-west4-b", "us-central1") == "europe-west4-b"


@pytest.mark.parametrize(
    "overrides",
    [{"zones": []}, {"replicas": -1}, {"instance_type": ""}],
)
def test_invalid_input(overrides):
    with pytest.raises(InvalidInputError):
        _build(**overrides)
