"""Apex code generation."""

from sfdc_webhooks.apex.components import (
    CommonComponents,
    build_components,
    common_components,
)
from sfdc_webhooks.apex.selection import TemplateSelection, select_templates

__all__ = [
    "CommonComponents",
    "TemplateSelection",
    "build_components",
    "common_components",
    "select_templates",
]
