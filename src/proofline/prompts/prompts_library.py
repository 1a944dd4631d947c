import logging
from pathlib import Path

import yaml

from .prompt import Prompt

logger = logging.getLogger(__name__)

BUILTIN_DIRECTORY = Path(__file__).parent / "library"


class PromptsLibrary:
    """Versioned prompts loaded from ``*.yaml`` files.

    Directories load in order, so a prompt in a later directory replaces one
    with the same name and version from an earlier directory. A directory
    that does not exist is skipped.

    Example:
        >>> library = PromptsLibrary(BUILTIN_DIRECTORY, "~/.config/proofline/prompts")
        >>> library.get("check_sentence", "1.0").render(sentence="She go home.")
    """

    def __init__(self, *directories: str | Path) -> None:
        self._prompts: dict[tuple[str, str], Prompt] = {}
        for directory in directories or (BUILTIN_DIRECTORY,):
            self._load_all(Path(directory).expanduser())
        logger.info("Loaded %d prompts", len(self._prompts))

    def get(self, name: str, version: str) -> Prompt:
        try:
            return self._prompts[(name, version)]
        except KeyError:
            logger.error("Prompt not found: name=%s, version=%s", name, version)
            raise KeyError(f"Prompt '{name}' version '{version}' not found")

    def list(self) -> list[tuple[str, str]]:
        return sorted(self._prompts)

    def _load_all(self, directory: Path) -> None:
        if not directory.is_dir():
            logger.warning("Prompt directory %s does not exist, skipping", directory)
            return
        for file_path in sorted(directory.glob("*.yaml")):
            with open(file_path, encoding="utf-8") as f:
                prompt = Prompt(**yaml.safe_load(f))
            key = (prompt.name, prompt.version)
            if key in self._prompts:
                logger.info("Prompt %s v%s overridden by %s", *key, file_path)
            self._prompts[key] = prompt
