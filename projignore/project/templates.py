"""
Per-language gitignore templates, downloaded once and cached on disk
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import httpx

from projignore.utils import get_logger

logger = get_logger(__name__)

DEFAULT_TEMPLATE_URL = "https://www.toptal.com/developers/gitignore/api/list?format=json"
DEFAULT_CACHE_FILENAME = "git-ignores.json"
DEFAULT_TIMEOUT = 30.0


class TemplateError(Exception):
    """Templates could not be downloaded or parsed"""


@dataclass
class TemplateConfig:
    """Where templates come from and where they are cached"""
    url: str = DEFAULT_TEMPLATE_URL
    cache_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    cache_filename: str = DEFAULT_CACHE_FILENAME
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        """Validate configuration"""
        self.cache_dir = Path(self.cache_dir)
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def cache_path(self) -> Path:
        return self.cache_dir / self.cache_filename

    @classmethod
    def from_env(cls) -> 'TemplateConfig':
        """
        Build configuration with environment overrides

        PROJIGNORE_TEMPLATE_URL, PROJIGNORE_CACHE_DIR and
        PROJIGNORE_HTTP_TIMEOUT replace the defaults when set.
        """
        return cls(
            url=os.getenv("PROJIGNORE_TEMPLATE_URL", DEFAULT_TEMPLATE_URL),
            cache_dir=Path(os.getenv("PROJIGNORE_CACHE_DIR", tempfile.gettempdir())),
            timeout=float(os.getenv("PROJIGNORE_HTTP_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )


@dataclass(frozen=True)
class Template:
    """One gitignore template"""
    key: str
    name: str
    file_name: str
    contents: str

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> 'Template':
        return cls(
            key=data["key"],
            name=data.get("name", data["key"]),
            file_name=data.get("fileName", ""),
            contents=data.get("contents", ""),
        )


def parse_templates(document: str) -> Dict[str, Template]:
    """
    Parse the JSON template listing

    Raises:
        TemplateError: If the document is not a valid listing
    """
    try:
        raw = json.loads(document)
        return {key: Template.from_dict(value) for key, value in raw.items()}
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise TemplateError(f"Unable to parse gitignore templates: {e}") from e


class TemplateStore:
    """
    Lookup of ignore template text by language key.

    The listing is loaded lazily on first use: from the cache file when it
    exists, otherwise from the network, after which the cache file is
    written. A store instance is owned by its caller; nothing is shared
    between instances except the cache file.
    """

    def __init__(self,
                 config: Optional[TemplateConfig] = None,
                 client: Optional[httpx.Client] = None):
        """
        Args:
            config: Template configuration (defaults to TemplateConfig.from_env())
            client: HTTP client to use instead of a fresh one per download
        """
        self.config = config or TemplateConfig.from_env()
        self._client = client
        self._templates: Optional[Dict[str, Template]] = None

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Union[str, Template]]) -> 'TemplateStore':
        """
        Build a store from in-memory templates, without any I/O

        Args:
            mapping: Language key to template text or Template
        """
        store = cls(config=TemplateConfig())
        store._templates = {
            key: value if isinstance(value, Template)
            else Template(key=key, name=key, file_name=f"{key}.gitignore", contents=value)
            for key, value in mapping.items()
        }
        return store

    def load(self) -> Dict[str, Template]:
        """
        Get all templates, loading them on first call

        Raises:
            TemplateError: If templates cannot be fetched or parsed
        """
        if self._templates is not None:
            return self._templates

        cache_path = self.config.cache_path
        if cache_path.exists():
            try:
                self._templates = parse_templates(cache_path.read_text(encoding="utf-8"))
                logger.debug(f"Loaded {len(self._templates)} templates from {cache_path}")
                return self._templates
            except (OSError, TemplateError) as e:
                logger.warning(f"Ignoring unreadable template cache {cache_path}: {e}")

        document = self.fetch()
        templates = parse_templates(document)

        try:
            cache_path.parent.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(document, encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write template cache {cache_path}: {e}")

        self._templates = templates
        logger.info(f"Fetched {len(templates)} templates from {self.config.url}")
        return self._templates

    def fetch(self) -> str:
        """
        Download the template listing

        Raises:
            TemplateError: On any HTTP or transport failure
        """
        logger.debug(f"Downloading templates from {self.config.url}")
        try:
            if self._client is not None:
                response = self._client.get(self.config.url)
            else:
                with httpx.Client(timeout=self.config.timeout, follow_redirects=True) as client:
                    response = client.get(self.config.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TemplateError(f"Download failed: {e}") from e
        return response.text

    def keys(self) -> List[str]:
        return sorted(self.load())

    def get(self, key: str) -> Optional[Template]:
        return self.load().get(key)

    def templates_for(self, langs: Iterable[str]) -> List[str]:
        """
        Get template contents for the given language keys

        Unknown keys are skipped.

        Returns:
            Template contents in the order of `langs`
        """
        templates = self.load()
        contents = []
        for lang in langs:
            template = templates.get(lang)
            if template is None:
                logger.debug(f"No ignore template for '{lang}'")
                continue
            contents.append(template.contents)
        return contents
