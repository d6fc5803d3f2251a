# src/pipeforge/core/serializer/__init__.py
"""Tradução bidirecional entre `PipelineGraph` e o documento declarativo YAML."""

from .pipeline_yaml import (
    ImportedPipeline,
    build_pipeline_document,
    dump_document,
    export_pipeline,
    import_pipeline,
    name_pipeline,
)

__all__ = [
    "ImportedPipeline",
    "build_pipeline_document",
    "dump_document",
    "export_pipeline",
    "import_pipeline",
    "name_pipeline",
]
