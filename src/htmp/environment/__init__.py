"""Compiler environment for htmp: configuration, loading, errors and the facade."""

from htmp.environment.core import Compiler, compile
from htmp.environment.exceptions import (
    ComponentDepthError,
    ComponentNotFoundError,
    ConfigurationError,
    DanglingBranchError,
    ErrorCode,
    InvalidValueError,
    MissingAttributeError,
    TemplateError,
    TemplateRuntimeError,
    TemplateStructureError,
    UndefinedError,
)
from htmp.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, Loader
from htmp.environment.merge import MergeStrategy, MergeStrategyRegistry
from htmp.environment.options import CompileOptions
from htmp.environment.registry import ComponentRegistry

__all__ = [
    "ChoiceLoader",
    "CompileOptions",
    "Compiler",
    "ComponentDepthError",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "ConfigurationError",
    "DanglingBranchError",
    "DictLoader",
    "ErrorCode",
    "FileSystemLoader",
    "InvalidValueError",
    "Loader",
    "MergeStrategy",
    "MergeStrategyRegistry",
    "MissingAttributeError",
    "TemplateError",
    "TemplateRuntimeError",
    "TemplateStructureError",
    "UndefinedError",
    "compile",
]
