import pulumi
import pulumi_kubernetes as k8s

from ..components.remote import remote
from ..config.models import Connection, KubernetesSpec


def make_k8s_provider_from_host(
    *,
    connection: Connection,
    kubeconfig_path: str,
    namespace: str | None = None,
) -> k8s.Provider:
    """Read a kubeconfig off the server over SSH and point its API address at the server."""
    get_kubeconfig = remote(
        "get-kubeconfig",
        connection=connection,
        create="\n".join([
            "set -euo pipefail",
            f'sudo cat {kubeconfig_path} | sed "s/127.0.0.1/{connection.host}/"',
        ]),
        triggers=[connection.host, kubeconfig_path],
    )

    return k8s.Provider(
        "k8s",
        kubeconfig=pulumi.Output.secret(get_kubeconfig.stdout),
        namespace=namespace,
    )


def make_k8s_provider(
    *,
    kubernetes: KubernetesSpec,
    connection: Connection | None,
) -> k8s.Provider | None:
    """
    Provider for the kubernetes objects, or None to use the ambient one.

    Precedence:
      - kubeconfig secret from stack config
      - kubeconfigPath fetched from serverIP
      - ambient provider (KUBECONFIG / current context), with namespace if set
    """
    if kubernetes.kubeconfig is not None:
        return k8s.Provider("k8s", kubeconfig=kubernetes.kubeconfig, namespace=kubernetes.namespace)

    if kubernetes.kubeconfigPath:
        if connection is None:
            raise ValueError("kubernetes.kubeconfigPath needs serverIP to fetch it from")
        return make_k8s_provider_from_host(
            connection=connection,
            kubeconfig_path=kubernetes.kubeconfigPath,
            namespace=kubernetes.namespace,
        )

    return None
