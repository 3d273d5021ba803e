"""Render OpenAPI specifications into standalone HTML reference pages."""

__version__ = "1.0.0"

from .config import AppConfig, load_config
from .core import RenderService
from .languages import DEFAULT_LANGUAGES, LanguageTable
from .models import CliOptions, ConversionOptions, RenderOptions, RenderResult
from .options import translate_options, validate_arguments

__all__ = [
    "__version__",
    "AppConfig",
    "load_config",
    "CliOptions",
    "ConversionOptions",
    "DEFAULT_LANGUAGES",
    "LanguageTable",
    "RenderOptions",
    "RenderResult",
    "RenderService",
    "translate_options",
    "validate_arguments",
]
