# src/pipeforge/artifacts/__init__.py
"""Artefatos gerados por script: Dockerfile, requirements.txt e descritores de deployment."""

from .generators import (
    DEFAULT_NAMESPACE,
    UDF_PORT,
    generate_build_file,
    generate_dependency_manifest,
    generate_deployment_manifests,
    generate_service_descriptor,
    generate_workload_descriptor,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "UDF_PORT",
    "generate_build_file",
    "generate_dependency_manifest",
    "generate_deployment_manifests",
    "generate_service_descriptor",
    "generate_workload_descriptor",
]
