"""
bundlerepo.index - Content Index Generation
=============================================

Components:
    - ContentIndexGenerator (ABC):  pluggable index producer / parser
    - GenerationContext:            inputs shared by every generation run
    - GeneratorRegistry:            type key → generator mapping
    - regenerate_index():           lookup + full rebuild + atomic replace,
                                    failures routed to the Reporter
    - R5IndexGenerator:             built-in "R5" gzip XML index
"""

from bundlerepo.index.generator import (
    DEFAULT_INDEX_NAME,
    ContentIndexGenerator,
    GenerationContext,
)
from bundlerepo.index.r5 import R5IndexGenerator
from bundlerepo.index.registry import (
    GENERATOR_FAILED,
    GENERATOR_NON_GENERATING,
    GENERATOR_NOT_FOUND,
    GeneratorRegistry,
    default_registry,
    regenerate_index,
)

__all__ = [
    "DEFAULT_INDEX_NAME",
    "ContentIndexGenerator",
    "GenerationContext",
    "R5IndexGenerator",
    "GENERATOR_FAILED",
    "GENERATOR_NON_GENERATING",
    "GENERATOR_NOT_FOUND",
    "GeneratorRegistry",
    "default_registry",
    "regenerate_index",
]
