from pydantic import BaseModel, Field

from .pool import Taint


class GCPDisk(BaseModel):
    type: str = Field(description="e.g., pd-ssd")
    size_gb: int
    image: str = Field(description="projects/<project>/global/images/<name>")
    boot: bool = True
    auto_delete: bool = True


class MachineSet(BaseModel):
    name: str
    namespace: str
    replicas: int
    labels: dict[str, str] = Field(default_factory=dict)
    selector: dict[str, str] = Field(default_factory=dict)
    role: str
    pool_name: str = Field(description="Leased character or logical pool name")
    project_id: str
    region: str
    zone: str
    machine_type: str
    disks: list[GCPDisk] = Field(default_factory=list)
    network: str
    subnetwork: str
    service_account_email: str
    tags: list[str] = Field(default_factory=list)
    user_data_secret: str
    node_labels: dict[str, str] = Field(default_factory=dict)
    taints: list[Taint] = Field(default_factory=list)
