"""Project scaffolding from versioned templates."""

from .initializer import TemplateInfo, TemplateInitializer

__all__ = [
    "TemplateInfo",
    "TemplateInitializer",
]
