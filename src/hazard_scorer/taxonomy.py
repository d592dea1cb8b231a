"""CICTT taxonomy store.

The taxonomy is static reference data: a YAML table bundled with the
package (or a replacement named in the configuration), loaded once per
process into an immutable ``Taxonomy``. Nothing in the package mutates it
after load.
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

import yaml
from pydantic import ValidationError

from .config import get_config
from .exceptions import TaxonomyError
from .schema import Category

logger = logging.getLogger(__name__)

DEFAULT_TAXONOMY_PATH = Path(__file__).parent / "data" / "cictt_taxonomy.yaml"


class Taxonomy:
    """Read-only catalog of categories in declaration order."""

    def __init__(self, categories: list[Category], groups: Optional[list[str]] = None):
        self._categories = tuple(categories)
        self._by_code: dict[str, Category] = {}
        for category in self._categories:
            if category.code in self._by_code:
                raise TaxonomyError(f"Duplicate category code: {category.code}")
            self._by_code[category.code] = category

        if groups is None:
            groups = list(dict.fromkeys(c.group for c in self._categories))
        self._groups = tuple(groups)

        unknown = sorted({c.group for c in self._categories} - set(self._groups))
        if unknown:
            raise TaxonomyError(f"Categories reference undeclared groups: {', '.join(unknown)}")

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def groups(self) -> tuple[str, ...]:
        return self._groups

    def get(self, code: str) -> Optional[Category]:
        return self._by_code.get(code)

    def by_group(self, group: str) -> list[Category]:
        return [c for c in self._categories if c.group == group]

    def search(self, term: str, threshold: int = 0) -> list[tuple[Category, int]]:
        """Find categories owning a keyword that contains ``term``.

        Each category appears once, paired with its highest weight among
        matching keywords above ``threshold``. Results are ordered by that
        weight, highest first; ties keep taxonomy order.
        """
        needle = term.lower().strip()
        if not needle:
            return []

        results = []
        for category in self._categories:
            weights = [
                weight for phrase, weight in category.keywords.items()
                if needle in phrase and weight > threshold
            ]
            if weights:
                results.append((category, max(weights)))

        results.sort(key=lambda item: item[1], reverse=True)
        return results

    @classmethod
    def from_dict(cls, data: dict) -> "Taxonomy":
        """Build a taxonomy from parsed YAML/JSON data."""
        if not isinstance(data, dict) or not data.get("categories"):
            raise TaxonomyError("Taxonomy data must contain a non-empty 'categories' list")

        categories = []
        for index, raw in enumerate(data["categories"]):
            try:
                categories.append(Category.model_validate(raw))
            except ValidationError as e:
                code = raw.get("code", f"#{index}") if isinstance(raw, dict) else f"#{index}"
                raise TaxonomyError(f"Invalid category {code}: {e}") from e

        return cls(categories, data.get("groups"))

    @classmethod
    def from_file(cls, path: Path) -> "Taxonomy":
        """Load a taxonomy from a YAML file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise TaxonomyError(f"Cannot read taxonomy file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise TaxonomyError(f"Invalid YAML in taxonomy file {path}: {e}") from e

        taxonomy = cls.from_dict(data)
        logger.info("Loaded %d categories in %d groups from %s",
                    len(taxonomy), len(taxonomy.groups), path)
        return taxonomy


# Global taxonomy instance
_taxonomy: Optional[Taxonomy] = None


def get_taxonomy() -> Taxonomy:
    """Get the process-wide taxonomy, loading it on first use."""
    global _taxonomy
    if _taxonomy is None:
        configured = get_config().taxonomy.path
        _taxonomy = Taxonomy.from_file(Path(configured) if configured else DEFAULT_TAXONOMY_PATH)
    return _taxonomy


def reset_taxonomy() -> None:
    """Drop the cached taxonomy so the next access reloads it."""
    global _taxonomy
    _taxonomy = None


def list_categories() -> list[Category]:
    """All categories in taxonomy order."""
    return list(get_taxonomy().categories)


def list_groups() -> list[str]:
    """All group labels in declared order."""
    return list(get_taxonomy().groups)


def get_category(code: str) -> Optional[Category]:
    """Look up a category by code."""
    return get_taxonomy().get(code)


def is_valid_code(code: str) -> bool:
    """Check whether a category code exists in the taxonomy."""
    return code in get_taxonomy()


def categories_by_group(group: str) -> list[Category]:
    """Categories belonging to ``group``, in taxonomy order."""
    return get_taxonomy().by_group(group)


def search_by_keyword(term: str, threshold: int = 0) -> list[tuple[Category, int]]:
    """Search the taxonomy's keyword vocabularies. See ``Taxonomy.search``."""
    return get_taxonomy().search(term, threshold)
