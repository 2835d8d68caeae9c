from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..core import (
    CLUSTER_DEPLOYMENT_NAME_LABEL,
    HIVE_API_GROUP,
    HIVE_API_VERSION,
    MACHINE_POOL_NAME_LABEL,
)


class OwnerReference(BaseModel):
    api_version: str = f"{HIVE_API_GROUP}/{HIVE_API_VERSION}"
    kind: str = "MachinePool"
    name: str
    uid: str
    controller: bool = True


class MachinePoolNameLease(BaseModel):
    name: str = Field(description="<infraID>-<char>")
    namespace: str
    labels: dict[str, str] = Field(default_factory=dict)
    owner: OwnerReference | None = None
    creation_timestamp: datetime | None = None

    @property
    def pool_name(self) -> str | None:
        return self.labels.get(MACHINE_POOL_NAME_LABEL)

    @property
    def cluster_name(self) -> str | None:
        return self.labels.get(CLUSTER_DEPLOYMENT_NAME_LABEL)

    @property
    def lease_char(self) -> str:
        """The claimed character, always the final character of the name."""
        return self.name[-1:]

    @classmethod
    def from_resource(cls, obj: dict[str, Any]) -> "MachinePoolNameLease":
        meta = obj.get("metadata", {})
        owner = None
        for ref in meta.get("ownerReferences") or []:
            if ref.get("controller"):
                owner = OwnerReference(
                    api_version=ref.get("apiVersion", ""),
                    kind=ref.get("kind", ""),
                    name=ref.get("name", ""),
                    uid=ref.get("uid", ""),
                )
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            labels=meta.get("labels") or {},
            owner=owner,
            creation_timestamp=meta.get("creationTimestamp"),
        )

    def to_resource(self) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "name": self.name,
            "namespace": self.namespace,
            "labels": dict(self.labels),
        }
        if self.owner:
            meta["ownerReferences"] = [
                {
                    "apiVersion": self.owner.api_version,
                    "kind": self.owner.kind,
                    "name": self.owner.name,
                    "uid": self.owner.uid,
                    "controller": self.owner.controller,
                }
            ]
        return {
            "apiVersion": f"{HIVE_API_GROUP}/{HIVE_API_VERSION}",
            "kind": "MachinePoolNameLease",
            "metadata": meta,
            "spec": {},
        }
