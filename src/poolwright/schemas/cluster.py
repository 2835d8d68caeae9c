from typing import Any

from pydantic import BaseModel, Field

from ..core import VERSION_LABEL


class GCPClusterPlatform(BaseModel):
    region: str


class ClusterPlatform(BaseModel):
    gcp: GCPClusterPlatform | None = None


class ClusterMetadata(BaseModel):
    infra_id: str = Field(description="Infrastructure ID, unique per cluster")


class ClusterDeployment(BaseModel):
    name: str
    namespace: str
    labels: dict[str, str] = Field(default_factory=dict)
    cluster_metadata: ClusterMetadata | None = None
    platform: ClusterPlatform = Field(default_factory=ClusterPlatform)

    @property
    def version(self) -> str | None:
        return self.labels.get(VERSION_LABEL)

    @classmethod
    def from_resource(cls, obj: dict[str, Any]) -> "ClusterDeployment":
        meta = obj.get("metadata", {})
        spec = obj.get("spec", {})

        cluster_metadata = None
        if spec.get("clusterMetadata"):
            cluster_metadata = ClusterMetadata(
                infra_id=spec["clusterMetadata"].get("infraID", "")
            )

        gcp = None
        gcp_spec = spec.get("platform", {}).get("gcp")
        if gcp_spec:
            gcp = GCPClusterPlatform(region=gcp_spec.get("region", ""))

        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            labels=meta.get("labels") or {},
            cluster_metadata=cluster_metadata,
            platform=ClusterPlatform(gcp=gcp),
        )
