"""Template extraction and token substitution."""

from forge.template.extract import extract_template
from forge.template.tokens import (
    DESCRIPTION_TOKEN,
    MODULE_PATH_TOKEN,
    PROJECT_NAME_TOKEN,
    SubstitutionReport,
    TokenSet,
    replace_tokens,
    replace_tokens_in_file,
)

__all__ = [
    "DESCRIPTION_TOKEN",
    "MODULE_PATH_TOKEN",
    "PROJECT_NAME_TOKEN",
    "SubstitutionReport",
    "TokenSet",
    "extract_template",
    "replace_tokens",
    "replace_tokens_in_file",
]
