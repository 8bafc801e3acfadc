"""Offline ``$ref`` resolution for the schema validator.

Every reference is dispatched by URL prefix onto the local filesystem:

    file://...                                  absolute filesystem open
    http(s)://json-schema.org/draft/2020-12/... embedded metaschema under meta/draft-2020-12/
    http(s)://json-schema.org/draft-07/...      embedded metaschema under meta/draft-07/
    https://schemas.fulmenhq.dev/...            catalog root
    bare relative path                          catalog root, then the working directory

Anything else is rejected, so compilation never touches the network.
"""

import re
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import unquote, urlsplit

from loguru import logger
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from pyfulmen.config import get_config
from pyfulmen.schema.documents import load_document
from pyfulmen.schema.errors import SchemaLoadError, SchemaParseError, SchemaReferenceError

META_DIR_NAME = "meta"

_METASCHEMA_PREFIXES = {
    "json-schema.org/draft/2020-12/": "draft-2020-12",
    "json-schema.org/draft-07/": "draft-07",
}

# <name>-v<semver>.<ext>, split on the last "-v" followed by a digit
_VERSIONED_NAME = re.compile(r"^(?P<name>.+)-v(?P<version>\d[^/]*?)(?:\.(?:schema\.)?(?:json|ya?ml))?$")

SCHEMA_EXTENSIONS = (".schema.json", ".schema.yaml", ".schema.yml", ".json", ".yaml", ".yml")


class ReferenceLoader:
    """Resolves schema URLs to parsed documents without network access.

    Args:
        schema_root: Catalog root directory; ``meta/`` beneath it holds the metaschemas
        url_prefix: Vendor URL prefix mapped onto ``schema_root``
    """

    def __init__(self, schema_root: Union[str, Path], url_prefix: Optional[str] = None):
        self.schema_root = Path(schema_root)
        self.url_prefix = url_prefix or get_config().schema_url_prefix
        self._resources: dict[str, Resource] = {}

    @property
    def meta_root(self) -> Path:
        return self.schema_root / META_DIR_NAME

    def resolve_path(self, url: str) -> Path:
        """Map a reference URL to a local file.

        Raises:
            SchemaReferenceError: If the URL is unsupported or no local file matches
        """
        url = url.split("#", 1)[0]
        if not url:
            raise SchemaReferenceError("empty reference URL")

        if url.startswith("file://"):
            return Path(unquote(urlsplit(url).path))

        if url.startswith(("http://", "https://")):
            without_scheme = url.split("://", 1)[1]
            for prefix, draft in _METASCHEMA_PREFIXES.items():
                if without_scheme.startswith(prefix):
                    return self._metaschema_path(draft, without_scheme[len(prefix) :], url)

            if url.startswith(self.url_prefix):
                return self._vendor_path(url[len(self.url_prefix) :], url)

            raise SchemaReferenceError(f"unsupported schema reference {url!r} (network access disabled)")

        if "://" in url:
            raise SchemaReferenceError(f"unsupported schema reference {url!r}")

        return self._relative_path(url)

    def load(self, url: str) -> Any:
        """Load and parse the document behind ``url``."""
        path = self.resolve_path(url)
        try:
            document = load_document(path)
        except (SchemaLoadError, SchemaParseError) as e:
            raise SchemaReferenceError(f"failed to load {url!r}: {e}") from e
        logger.trace("Resolved schema reference", url=url, path=str(path))
        return document

    def retrieve(self, uri: str) -> Resource:
        """Retrieval hook for ``referencing.Registry``."""
        resource = self._resources.get(uri)
        if resource is None:
            resource = Resource.from_contents(self.load(uri), default_specification=DRAFT202012)
            self._resources[uri] = resource
        return resource

    def registry(self) -> Registry:
        return Registry(retrieve=self.retrieve)

    # --- Dispatch Helpers ---

    def _metaschema_path(self, draft: str, remainder: str, url: str) -> Path:
        base = self.meta_root / draft
        remainder = remainder.strip("/") or "schema"
        candidates = [base / remainder, base / f"{remainder}.json"]
        for candidate in candidates:
            if candidate.is_file():
                return candidate
        raise SchemaReferenceError(f"metaschema for {url!r} is not embedded under {base}")

    def _vendor_path(self, remainder: str, url: str) -> Path:
        remainder = remainder.strip("/")
        remainder = remainder.removeprefix("crucible/")
        category, _, filename = remainder.rpartition("/")

        match = _VERSIONED_NAME.match(filename)
        if match:
            name, version = match.group("name"), match.group("version")
            directory = self.schema_root / category / f"v{version}"
        else:
            name = _strip_extension(filename)
            directory = self._default_version_dir(self.schema_root / category)

        for extension in SCHEMA_EXTENSIONS:
            candidate = directory / f"{name}{extension}"
            if candidate.is_file():
                return candidate

        # Direct layout: the URL path mirrors the catalog tree
        direct = self.schema_root / remainder
        if direct.is_file():
            return direct

        raise SchemaReferenceError(f"no local schema for {url!r} under {self.schema_root}")

    def _default_version_dir(self, category_dir: Path) -> Path:
        if category_dir.is_dir():
            versions = sorted(p for p in category_dir.iterdir() if p.is_dir() and p.name.startswith("v"))
            if versions:
                return versions[0]
        return category_dir / "v1.0.0"

    def _relative_path(self, url: str) -> Path:
        relative = Path(unquote(url))
        for base in (self.schema_root, Path.cwd()):
            candidate = base / relative
            if candidate.is_file():
                return candidate
        raise SchemaReferenceError(f"relative schema reference {url!r} not found")


def _strip_extension(filename: str) -> str:
    for extension in SCHEMA_EXTENSIONS:
        if filename.endswith(extension):
            return filename[: -len(extension)]
    return filename


def file_uri(path: Union[str, Path]) -> str:
    return Path(path).resolve().as_uri()


# --- Catalog Location ---

CONVENTIONAL_SCHEMA_DIR = Path("schemas") / "crucible-py"

PACKAGED_SCHEMA_ROOT = Path(__file__).parent.parent / "data" / "schemas" / "crucible-py"

# How many parent directories of the cwd are searched for the conventional path
MAX_PARENT_SEARCH = 4


def resolve_default_root(start: Optional[Path] = None) -> Path:
    """Locate the schema catalog root.

    Resolution order:
      1. ``PYFULMEN_SCHEMA_ROOT``
      2. ``schemas/crucible-py`` in the working directory or up to four ancestors
      3. the catalog packaged with pyfulmen
    """
    configured = get_config().schema_root
    if configured is not None:
        return configured

    current = (start or Path.cwd()).resolve()
    for directory in [current, *current.parents][: MAX_PARENT_SEARCH + 1]:
        candidate = directory / CONVENTIONAL_SCHEMA_DIR
        if candidate.is_dir():
            return candidate

    return PACKAGED_SCHEMA_ROOT
