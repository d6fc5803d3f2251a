# tests/core/artifacts/test_generators.py
"""
Testes dos geradores de artefatos por script.

Os testes asseguram que:
- o Dockerfile referencia exatamente o entrypoint sanitizado
- o manifest de dependências é estável
- os descritores de Deployment/Service usam nomes de recurso sanitizados
"""

from pipeforge.artifacts.generators import (
    BUILD_FILE_TEMPLATE,
    UDF_PORT,
    generate_build_file,
    generate_dependency_manifest,
    generate_deployment_manifests,
    generate_service_descriptor,
    generate_workload_descriptor,
)


def test_build_file_uses_sanitized_entrypoint():
    text = generate_build_file("even-odd")
    assert text == (
        "FROM python:3.10-slim\n\n"
        "WORKDIR /app\n\n"
        "COPY . /app\n\n"
        "RUN pip install -r requirements.txt\n\n"
        'CMD ["python", "-u","even-odd.py"]\n'
    )
    assert '"my_script_.py"' in generate_build_file("my script!")
    assert "{entrypoint}" in BUILD_FILE_TEMPLATE


def test_dependency_manifest():
    assert generate_dependency_manifest() == "pynumaflow>=1.0.0\n"


def test_workload_descriptor():
    d = generate_workload_descriptor("my script", namespace="pipelines")
    assert d["apiVersion"] == "apps/v1"
    assert d["kind"] == "Deployment"
    assert d["metadata"]["name"] == "my-script-deployment"
    assert d["metadata"]["namespace"] == "pipelines"
    assert d["spec"]["replicas"] == 1
    assert d["spec"]["selector"]["matchLabels"] == {"app": "my-script"}

    container = d["spec"]["template"]["spec"]["containers"][0]
    assert container["image"] == "my-script:latest"
    assert container["imagePullPolicy"] == "IfNotPresent"
    assert container["ports"] == [{"containerPort": UDF_PORT, "name": "grpc"}]
    assert container["resources"]["limits"] == {"memory": "512Mi", "cpu": "500m"}


def test_service_descriptor():
    s = generate_service_descriptor("even-odd")
    assert s["kind"] == "Service"
    assert s["metadata"]["name"] == "even-odd-service"
    assert s["metadata"]["namespace"] == "default"
    assert s["spec"]["selector"] == {"app": "even-odd"}
    assert s["spec"]["type"] == "ClusterIP"
    port = s["spec"]["ports"][0]
    assert port["port"] == port["targetPort"] == 50051


def test_deployment_manifests_keys():
    out = generate_deployment_manifests("even-odd")
    assert list(out) == ["even-odd-deployment.yaml", "even-odd-service.yaml"]
