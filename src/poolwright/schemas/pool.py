from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class PoolCondition(BaseModel):
    type: str
    status: str = Field(description="True, False or Unknown")
    reason: str = ""
    message: str = ""
    last_probe_time: datetime | None = None
    last_transition_time: datetime | None = None

    def to_resource(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.type,
            "status": self.status,
            "reason": self.reason,
            "message": self.message,
        }
        if self.last_probe_time:
            out["lastProbeTime"] = _timestamp(self.last_probe_time)
        if self.last_transition_time:
            out["lastTransitionTime"] = _timestamp(self.last_transition_time)
        return out


class Taint(BaseModel):
    key: str
    value: str = ""
    effect: str


class GCPMachinePoolPlatform(BaseModel):
    zones: list[str] = Field(default_factory=list)
    instance_type: str = Field(description="e.g., n1-standard-4")


class MachinePoolPlatform(BaseModel):
    gcp: GCPMachinePoolPlatform | None = None


class MachinePool(BaseModel):
    name: str = Field(description="Object name, [clusterdeployment]-[spec name]")
    namespace: str
    uid: str = ""
    pool_name: str = Field(description="Logical pool name as configured (spec.name)")
    replicas: int = 1
    labels: dict[str, str] = Field(default_factory=dict)
    taints: list[Taint] = Field(default_factory=list)
    platform: MachinePoolPlatform = Field(default_factory=MachinePoolPlatform)
    conditions: list[PoolCondition] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_resource(cls, obj: dict[str, Any]) -> "MachinePool":
        meta = obj.get("metadata", {})
        spec = obj.get("spec", {})
        status = obj.get("status") or {}

        gcp = None
        gcp_spec = spec.get("platform", {}).get("gcp")
        if gcp_spec:
            gcp = GCPMachinePoolPlatform(
                zones=gcp_spec.get("zones") or [],
                instance_type=gcp_spec.get("type", ""),
            )

        conditions = [
            PoolCondition(
                type=c["type"],
                status=c.get("status", "Unknown"),
                reason=c.get("reason", ""),
                message=c.get("message", ""),
                last_probe_time=c.get("lastProbeTime"),
                last_transition_time=c.get("lastTransitionTime"),
            )
            for c in status.get("conditions") or []
        ]

        replicas = spec.get("replicas")
        return cls(
            name=meta.get("name", ""),
            namespace=meta.get("namespace", ""),
            uid=meta.get("uid", ""),
            pool_name=spec.get("name", ""),
            replicas=1 if replicas is None else replicas,
            labels=spec.get("labels") or {},
            taints=[Taint(**t) for t in spec.get("taints") or []],
            platform=MachinePoolPlatform(gcp=gcp),
            conditions=conditions,
        )


def _timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
