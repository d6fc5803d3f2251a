# src/pipeforge/artifacts/generators.py
"""
Geradores de artefatos de build e deployment.

Funções puras que produzem o conteúdo dos arquivos gerados para cada
script de transformação:

    - Dockerfile (template fixo; única substituição é o entrypoint)
    - requirements.txt (conteúdo estático, independente do projeto)
    - descritores de Deployment e Service (dados estruturados)

Os descritores não são aplicados em lugar nenhum: são apenas dados que
acompanham o projeto quando o chamador pede manifests de deployment.

Invariantes:
    - A mesma entrada produz sempre a mesma saída, byte a byte
    - Nenhum gerador lê estado do projeto
"""

from __future__ import annotations

from typing import Any, Dict

from pipeforge.core.naming import sanitize_filesystem_name, sanitize_resource_name


DEFAULT_NAMESPACE = "default"
UDF_PORT = 50051
UDF_PORT_NAME = "grpc"
RUNTIME_DEPENDENCY = "pynumaflow>=1.0.0"

RESOURCE_REQUESTS = {"memory": "128Mi", "cpu": "100m"}
RESOURCE_LIMITS = {"memory": "512Mi", "cpu": "500m"}

BUILD_FILE_TEMPLATE = """FROM python:3.10-slim

WORKDIR /app

COPY . /app

RUN pip install -r requirements.txt

CMD ["python", "-u","{entrypoint}"]
"""


def generate_build_file(script_name: str) -> str:
    """Dockerfile do script; o entrypoint é `<nome sanitizado>.py`."""
    entrypoint = f"{sanitize_filesystem_name(script_name)}.py"
    return BUILD_FILE_TEMPLATE.format(entrypoint=entrypoint)


def generate_dependency_manifest() -> str:
    return f"{RUNTIME_DEPENDENCY}\n"


def _labels(resource_name: str) -> Dict[str, str]:
    return {"app": resource_name, "component": "udf"}


def generate_workload_descriptor(script_name: str, namespace: str = DEFAULT_NAMESPACE) -> Dict[str, Any]:
    """
    Descritor de Deployment para o script como worker endereçável na rede.

    Imagem `<nome-recurso>:latest`, uma réplica, porta gRPC fixa e o
    quarteto fixo de requests/limits.
    """
    name = sanitize_resource_name(script_name)
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {
            "name": f"{name}-deployment",
            "namespace": namespace,
            "labels": _labels(name),
        },
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": {"app": name}},
            "template": {
                "metadata": {"labels": _labels(name)},
                "spec": {
                    "containers": [
                        {
                            "name": name,
                            "image": f"{name}:latest",
                            "imagePullPolicy": "IfNotPresent",
                            "ports": [{"containerPort": UDF_PORT, "name": UDF_PORT_NAME}],
                            "resources": {
                                "requests": dict(RESOURCE_REQUESTS),
                                "limits": dict(RESOURCE_LIMITS),
                            },
                        }
                    ]
                },
            },
        },
    }


def generate_service_descriptor(script_name: str, namespace: str = DEFAULT_NAMESPACE) -> Dict[str, Any]:
    """Descritor de Service (ClusterIP) que expõe a porta gRPC do worker."""
    name = sanitize_resource_name(script_name)
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {
            "name": f"{name}-service",
            "namespace": namespace,
            "labels": _labels(name),
        },
        "spec": {
            "selector": {"app": name},
            "ports": [
                {
                    "port": UDF_PORT,
                    "targetPort": UDF_PORT,
                    "protocol": "TCP",
                    "name": UDF_PORT_NAME,
                }
            ],
            "type": "ClusterIP",
        },
    }


def generate_deployment_manifests(script_name: str, namespace: str = DEFAULT_NAMESPACE) -> Dict[str, Dict[str, Any]]:
    """Par Deployment + Service indexado pelos nomes de arquivo convencionais."""
    name = sanitize_resource_name(script_name)
    return {
        f"{name}-deployment.yaml": generate_workload_descriptor(script_name, namespace),
        f"{name}-service.yaml": generate_service_descriptor(script_name, namespace),
    }
