"""
Kubernetes workload recipe template.

Objects for a client whose workload name is W (client name plus the node's
replica suffix):

    config-map         W-config                 (client TOML file)
    env-config-map     W-env-config             (optional, container environment)
    secret             W-execution-jwt          (jwt.hex)
    volume-claim       W-data                   (optionally from a VolumeSnapshot)
    extra-volume-claim W-persistent-storage     (optional, execution extension storage)
    stateful-set       W-set                    -> every object above
    governing-service  W-headless-service       headless, stable pod DNS
    p2p-service        W-p2pnet-service | W-p2p-service        NodePort, TCP+UDP
    internal-service   W-internal-service | W-metrics-service  ClusterIP
    rpc-service        W-rpc-service            NodePort, optional
"""
from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from ..config.models import ClientSpec, Role
from ..constants import (
    JWT_MOUNT_PATH,
    JWT_SECRET_KEY,
    LABEL_APP,
    LABEL_INSTANCE,
    LABEL_MANAGED_BY,
    LABEL_NAME,
    LABEL_PART_OF,
    MANAGED_BY,
)
from ..plan import Plan

if TYPE_CHECKING:
    from ..catalog import ClientDescriptor

CONFIG_MAP = "config-map"
ENV_CONFIG_MAP = "env-config-map"
SECRET = "secret"
VOLUME_CLAIM = "volume-claim"
EXTRA_VOLUME_CLAIM = "extra-volume-claim"
STATEFUL_SET = "stateful-set"
GOVERNING_SERVICE = "governing-service"
P2P_SERVICE = "p2p-service"
INTERNAL_SERVICE = "internal-service"
RPC_SERVICE = "rpc-service"

_P2P_SERVICE_SUFFIX = {Role.EXECUTION: "p2pnet-service", Role.CONSENSUS: "p2p-service"}
_INTERNAL_SERVICE_SUFFIX = {Role.EXECUTION: "internal-service", Role.CONSENSUS: "metrics-service"}


def read_config_file(path: str) -> str:
    expanded = os.path.expanduser(path)
    if not os.path.isfile(expanded):
        raise FileNotFoundError(f"configPath does not exist: {expanded}")

    with open(expanded, "r", encoding="utf-8") as f:
        return f.read()


def workload_name(client: str, instance: str = "") -> str:
    return f"{client}{instance}"


def object_names(role: Role, workload: str) -> dict[str, str]:
    return {
        CONFIG_MAP: f"{workload}-config",
        ENV_CONFIG_MAP: f"{workload}-env-config",
        SECRET: f"{workload}-execution-jwt",
        VOLUME_CLAIM: f"{workload}-data",
        EXTRA_VOLUME_CLAIM: f"{workload}-persistent-storage",
        STATEFUL_SET: f"{workload}-set",
        GOVERNING_SERVICE: f"{workload}-headless-service",
        P2P_SERVICE: f"{workload}-{_P2P_SERVICE_SUFFIX[role]}",
        INTERNAL_SERVICE: f"{workload}-{_INTERNAL_SERVICE_SUFFIX[role]}",
        RPC_SERVICE: f"{workload}-rpc-service",
    }


def _claim_spec(size: str, storage_class: str, snapshot: str | None) -> dict[str, Any]:
    claim: dict[str, Any] = {
        "accessModes": ["ReadWriteOnce"],
        "resources": {"requests": {"storage": size}},
        "storageClassName": storage_class,
    }
    if snapshot:
        claim["dataSource"] = {
            "apiGroup": "snapshot.storage.k8s.io",
            "kind": "VolumeSnapshot",
            "name": snapshot,
        }
    return claim


def kubernetes_plan(client: ClientDescriptor, spec: ClientSpec, scope: str) -> Plan:
    name = client.name.value
    workload = spec.workload
    if workload is None:
        raise ValueError(f"kubernetes deployment of {name} needs a {spec.role.value} workload config")
    if spec.jwt_secret is None:
        raise ValueError(f"kubernetes deployment of {name} needs a jwt secret")
    if workload.extraSnapshotName and not workload.extraStorageSize:
        raise ValueError(f"{spec.role.value}.extraSnapshotName needs extraStorageSize")

    app = workload_name(name, spec.instance)
    names = object_names(spec.role, app)

    def metadata(object_name: str) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "name": object_name,
            "labels": {
                LABEL_NAME: object_name,
                LABEL_PART_OF: app,
                LABEL_MANAGED_BY: MANAGED_BY,
            },
        }
        if spec.namespace:
            meta["namespace"] = spec.namespace
        return meta

    plan = Plan(scope)

    # 1) config + jwt
    config_map = plan.add(
        CONFIG_MAP,
        "config_map",
        {
            "metadata": metadata(names[CONFIG_MAP]),
            "data": {client.config_file: read_config_file(workload.configPath)},
        },
    )
    secret = plan.add(
        SECRET,
        "secret",
        {
            "metadata": metadata(names[SECRET]),
            "string_data": {JWT_SECRET_KEY: spec.jwt_secret},
        },
    )
    prerequisites = [config_map, secret]

    container: dict[str, Any] = {}
    if workload.environment is not None:
        prerequisites.append(
            plan.add(
                ENV_CONFIG_MAP,
                "config_map",
                {"metadata": metadata(names[ENV_CONFIG_MAP]), "data": dict(workload.environment)},
            )
        )
        container["envFrom"] = [{"configMapRef": {"name": names[ENV_CONFIG_MAP], "optional": True}}]

    # 2) volumes
    prerequisites.append(
        plan.add(
            VOLUME_CLAIM,
            "volume_claim",
            {
                "metadata": metadata(names[VOLUME_CLAIM]),
                "spec": _claim_spec(workload.storageSize, workload.storageClass, workload.snapshotName),
            },
        )
    )

    volume_mounts = [
        {"name": names[CONFIG_MAP], "mountPath": client.config_mount},
        {"name": names[VOLUME_CLAIM], "mountPath": client.data_mount},
        {"name": names[SECRET], "mountPath": JWT_MOUNT_PATH, "readOnly": True},
    ]
    volumes = [
        {"name": names[CONFIG_MAP], "configMap": {"name": names[CONFIG_MAP]}},
        {"name": names[VOLUME_CLAIM], "persistentVolumeClaim": {"claimName": names[VOLUME_CLAIM]}},
        {"name": names[SECRET], "secret": {"secretName": names[SECRET]}},
    ]

    if workload.extraStorageSize:
        prerequisites.append(
            plan.add(
                EXTRA_VOLUME_CLAIM,
                "volume_claim",
                {
                    "metadata": metadata(names[EXTRA_VOLUME_CLAIM]),
                    "spec": _claim_spec(workload.extraStorageSize, workload.storageClass, workload.extraSnapshotName),
                },
            )
        )
        volume_mounts.append({"name": names[EXTRA_VOLUME_CLAIM], "mountPath": workload.extraStoragePath})
        volumes.append(
            {"name": names[EXTRA_VOLUME_CLAIM], "persistentVolumeClaim": {"claimName": names[EXTRA_VOLUME_CLAIM]}}
        )

    # 3) workload
    container_ports = [
        {"name": "p2p-tcp", "containerPort": client.p2p_port, "protocol": "TCP"},
        {"name": "p2p-udp", "containerPort": client.p2p_port, "protocol": "UDP"},
        {"name": "metrics", "containerPort": client.metrics_port, "protocol": "TCP"},
        {"name": "rpc", "containerPort": client.rpc_port, "protocol": "TCP"},
    ]
    if client.engine_port is not None:
        container_ports.append({"name": "engine", "containerPort": client.engine_port, "protocol": "TCP"})

    pod_labels = {LABEL_APP: app, LABEL_NAME: app, LABEL_PART_OF: app}
    if spec.instance:
        pod_labels[LABEL_INSTANCE] = spec.instance.lstrip("-")
    selector = {LABEL_APP: app}

    container.update(
        {
            "name": app,
            "image": workload.image,
            "command": list(workload.command),
            "ports": container_ports,
            "volumeMounts": volume_mounts,
            "resources": {
                "requests": {"cpu": workload.cpuRequest, "memory": workload.memoryRequest},
                "limits": {"cpu": workload.cpuLimit, "memory": workload.memoryLimit},
            },
        }
    )

    # the governing service must exist before the set so pod DNS resolves
    governing = plan.add(
        GOVERNING_SERVICE,
        "network_service",
        {
            "metadata": metadata(names[GOVERNING_SERVICE]),
            "spec": {
                "clusterIP": "None",
                "selector": selector,
                "ports": [{"name": "metrics", "port": client.metrics_port, "targetPort": client.metrics_port}],
            },
        },
    )

    plan.add(
        STATEFUL_SET,
        "stateful_set",
        {
            "metadata": metadata(names[STATEFUL_SET]),
            "spec": {
                "replicas": 1,
                "serviceName": names[GOVERNING_SERVICE],
                "selector": {"matchLabels": selector},
                "template": {
                    "metadata": {"labels": pod_labels},
                    "spec": {"containers": [container], "volumes": volumes},
                },
            },
        },
        depends_on=[*prerequisites, governing],
    )

    # 4) services, all selecting the workload's pods
    plan.add(
        P2P_SERVICE,
        "network_service",
        {
            "metadata": metadata(names[P2P_SERVICE]),
            "spec": {
                "type": "NodePort",
                "selector": selector,
                "ports": [
                    {"name": "p2p-tcp", "port": client.p2p_port, "targetPort": client.p2p_port, "protocol": "TCP"},
                    {"name": "p2p-udp", "port": client.p2p_port, "targetPort": client.p2p_port, "protocol": "UDP"},
                ],
            },
        },
    )

    internal_ports = [{"name": "metrics", "port": client.metrics_port, "targetPort": client.metrics_port}]
    if client.engine_port is not None:
        internal_ports.append({"name": "engine", "port": client.engine_port, "targetPort": client.engine_port})
    plan.add(
        INTERNAL_SERVICE,
        "network_service",
        {
            "metadata": metadata(names[INTERNAL_SERVICE]),
            "spec": {"type": "ClusterIP", "selector": selector, "ports": internal_ports},
        },
    )

    rpc_ingress = workload.rpcIngress if workload.rpcIngress is not None else spec.role == Role.EXECUTION
    if rpc_ingress:
        plan.add(
            RPC_SERVICE,
            "network_service",
            {
                "metadata": metadata(names[RPC_SERVICE]),
                "spec": {
                    "type": "NodePort",
                    "selector": selector,
                    "ports": [{"name": "rpc", "port": client.rpc_port, "targetPort": client.rpc_port}],
                },
            },
        )

    return plan
