"""
Directory and site catalog collaborators for the Group Access Service.

The registry only depends on the two protocols below. ``YamlDirectoryCatalog``
is a file-backed implementation of both, used by the command line tools and
the HTTP service when no live directory is wired in.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import yaml

from shared.errors import DirectoryUnavailableError
from shared.logging import get_logger


@dataclass
class Site:
    """A site access can be granted on."""
    id: int
    name: str
    main_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Site":
        site_id = data.get("id", data.get("idsite"))
        if site_id is None:
            raise ValueError(f"Site entry without id: {data!r}")
        return cls(
            id=int(site_id),
            name=str(data.get("name", "")),
            main_url=str(data.get("main_url", data.get("url", "")))
        )


class GroupLister(Protocol):
    """Lists the names of all groups known to the directory."""

    def get_all_group_names(self) -> List[str]:
        ...


class SiteCatalog(Protocol):
    """Lists every site access can be granted on."""

    def get_all_sites(self) -> List[Site]:
        ...


class StaticDirectoryCatalog:
    """In-memory group lister and site catalog."""

    def __init__(self, groups: Optional[List[str]] = None, sites: Optional[List[Site]] = None):
        self.groups = list(groups or [])
        self.sites = list(sites or [])

    def get_all_group_names(self) -> List[str]:
        return list(self.groups)

    def get_all_sites(self) -> List[Site]:
        return list(self.sites)


class YamlDirectoryCatalog:
    """Group lister and site catalog read from a YAML document.

    Expected layout::

        groups:
          - admins
          - readers
        sites:
          - id: 1
            name: Intranet
            main_url: https://intranet.example.com
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = get_logger("group_access.directory.yaml")

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self.path, 'r') as f:
                document = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DirectoryUnavailableError(
                f"Unable to read catalog {self.path}",
                {"path": str(self.path), "error": str(e)}
            )

        if not isinstance(document, dict):
            raise DirectoryUnavailableError(
                f"Catalog {self.path} must be a mapping",
                {"path": str(self.path)}
            )
        return document

    def get_all_group_names(self) -> List[str]:
        """Return all group names in document order."""
        groups = self._load().get("groups") or []
        self.logger.debug("Groups listed", path=str(self.path), count=len(groups))
        return [str(group) for group in groups]

    def get_all_sites(self) -> List[Site]:
        """Return all sites in document order."""
        sites = [Site.from_dict(entry) for entry in self._load().get("sites") or []]
        self.logger.debug("Sites listed", path=str(self.path), count=len(sites))
        return sites
