from .prompt import Prompt
from .prompts_library import BUILTIN_DIRECTORY, PromptsLibrary

__all__ = [
    "BUILTIN_DIRECTORY",
    "Prompt",
    "PromptsLibrary",
]
