"""Source generation for interface implementations."""

from __future__ import annotations

from .encoder import encode
from .synthesizer import (
    default_value_for,
    impl_name,
    render_header,
    render_method_body,
    render_parameter_list,
    synthesize,
)

__all__ = [
    "default_value_for",
    "encode",
    "impl_name",
    "render_header",
    "render_method_body",
    "render_parameter_list",
    "synthesize",
]
