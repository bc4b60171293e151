"""Discovery of what the reference library (graphql-ruby) already provides."""

import logging
import re
from pathlib import Path

from .errors import ReferenceLibraryError

logger = logging.getLogger(__name__)

CLASS_DECLARATION = re.compile(r"class\s+(\w+)\s+<")


class ReferenceLibrary:
    """A checkout of graphql-ruby, used to find built-in types and directives.

    Example:
        library = ReferenceLibrary("./graphql-ruby")
        library.builtin_type_names()  # ["Boolean", "Float", "ID", ...]
    """

    TYPES_DIR = "lib/graphql/types"
    DIRECTIVE_DIR = "lib/graphql/directive"

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def builtin_type_names(self) -> list[str]:
        """Return the class declared in each base-type source file.

        Raises:
            ReferenceLibraryError: If the types directory is missing or
                declares no classes
        """
        types_dir = self.root / self.TYPES_DIR
        names = []
        if types_dir.is_dir():
            for path in sorted(types_dir.glob("*.rb")):
                match = CLASS_DECLARATION.search(path.read_text(encoding="utf-8"))
                if not match:
                    continue
                logger.debug("Registering type '%s' as built-in type.", match.group(1))
                names.append(match.group(1))
        if not names:
            raise ReferenceLibraryError(types_dir)
        return names

    def supports_directive(self, name: str) -> bool:
        """Check whether a directive has an implementation file."""
        return (self.root / self.DIRECTIVE_DIR / f"{name}_directive.rb").is_file()
