"""Vellum environment: configuration, view loading, resolution and errors."""

from vellum.environment.core import Environment
from vellum.environment.exceptions import (
    ErrorCode,
    IncludeDepthError,
    SourceSnippet,
    ViewError,
    ViewNotFoundError,
    ViewRuntimeError,
    ViewStorageError,
    ViewSyntaxError,
    build_source_snippet,
)
from vellum.environment.loaders import FileSystemLoader, validate_view_name, view_name_to_path
from vellum.environment.resolver import ViewResolver

__all__ = [
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "IncludeDepthError",
    "SourceSnippet",
    "ViewError",
    "ViewNotFoundError",
    "ViewResolver",
    "ViewRuntimeError",
    "ViewStorageError",
    "ViewSyntaxError",
    "build_source_snippet",
    "validate_view_name",
    "view_name_to_path",
]
