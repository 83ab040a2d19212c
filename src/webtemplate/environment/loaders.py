"""Template loaders.

A loader maps a template name to raw markup text. The expansion engine
calls ``load_markup(name)`` for the skeleton, the page template and every
``<render-template file="...">`` partial.

Built-in Loaders:
- `FileSystemLoader`: Load from filesystem directories (default: ``templates/``)
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (theme fallback)
- `FunctionLoader`: Wrap a callable as a loader

Custom Loaders:
Implement the TemplateLoader protocol:
    ```python
    class DatabaseLoader:
        def load_markup(self, name: str) -> str:
            row = db.query("SELECT html FROM templates WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.html
    ```

Thread-Safety:
Loaders are read-only and may be shared by concurrent renders.

"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from webtemplate.environment.exceptions import TemplateNotFoundError
from webtemplate.utils.constants import DEFAULT_TEMPLATE_DIRECTORY


@runtime_checkable
class TemplateLoader(Protocol):
    """Anything that can turn a template name into markup text."""

    def load_markup(self, name: str) -> str: ...


class FileSystemLoader:
    """Load templates from one or more directories.

    Directories are searched in order; the first file found wins:
        ```python
        loader = FileSystemLoader(["themes/custom/", "themes/default/"])
        ```

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> loader.load_markup("skeleton.html")
            '<html>...'

    Raises:
        TemplateNotFoundError: If the template is not in any search path
    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path] = DEFAULT_TEMPLATE_DIRECTORY,
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def load_markup(self, name: str) -> str:
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path.read_text(self._encoding)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self) -> list[str]:
        """List every ``.html`` file below the search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*.html"):
                    templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory mapping of name → markup.

    Example:
            >>> loader = DictLoader({
            ...     "skeleton.html": "<html><body><main></main></body></html>",
            ...     "page.html": "<main>Hi</main>",
            ... })
            >>> loader.load_markup("page.html")
            '<main>Hi</main>'

    Raises:
        TemplateNotFoundError: If the name is not in the mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def load_markup(self, name: str) -> str:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name]

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try several loaders in order and return the first hit.

    Example:
            >>> loader = ChoiceLoader([
            ...     DictLoader({"nav.html": "<nav>Custom</nav>"}),
            ...     FileSystemLoader("templates/"),
            ... ])
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[TemplateLoader]):
        self._loaders = loaders

    def load_markup(self, name: str) -> str:
        for loader in self._loaders:
            try:
                return loader.load_markup(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )


class FunctionLoader:
    """Wrap a callable ``name -> markup | None`` as a loader.

    Example:
            >>> loader = FunctionLoader(lambda name: "<main/>" if name == "x.html" else None)
            >>> loader.load_markup("x.html")
            '<main/>'
    """

    __slots__ = ("_load_func",)

    def __init__(self, load_func: Callable[[str], str | None]):
        self._load_func = load_func

    def load_markup(self, name: str) -> str:
        result = self._load_func(name)
        if result is None:
            raise TemplateNotFoundError(f"Template '{name}' not found")
        return result
