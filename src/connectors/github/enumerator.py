"""Traverses GitHub one repository at a time."""

from common.logger import get_logger
from sync.enumerator import UnitEnumerator
from sync.errors import ItemNotFoundError
from sync.models import PushRecord

from .client import GitHubClient
from .objects import content_fingerprint, updated_fingerprint
from .paths import identifier_for

logger = get_logger(__name__)


class GitHubEnumerator(UnitEnumerator):
    """Enumerates repositories, their issues, pull requests and files.

    Each configured name is either "owner/repo" or an organization, which
    expands to all of its repositories. A repository is one traversal unit.
    """

    def __init__(self, client: GitHubClient, names: list[str]):
        self.client = client
        self.names = names

    def list_units(self) -> list[str]:
        units: list[str] = []
        for name in self.names:
            if "/" in name:
                units.append(name)
                continue
            repos = self.client.list_org_repositories(name)
            logger.info(f"Organization {name}: {len(repos)} repositories")
            units.extend(sorted(repo["full_name"] for repo in repos))

        # Keep the first occurrence when a repository is listed twice
        return list(dict.fromkeys(units))

    def collect_unit(self, unit: str) -> list[PushRecord]:
        try:
            repo = self.client.get_repository(unit)
        except ItemNotFoundError:
            # Everything previously indexed for it is swept as Missing
            logger.warning(f"Repository {unit} no longer exists, skipping")
            return []

        records = [PushRecord(identifier_for(repo["html_url"]), updated_fingerprint(repo))]
        records.extend(self._collect_issues(unit))
        records.extend(self._collect_files(unit, repo.get("default_branch")))
        return records

    def _collect_issues(self, full_name: str) -> list[PushRecord]:
        try:
            issues = self.client.list_issues(full_name)
        except ItemNotFoundError:
            logger.debug(f"  Issues disabled for {full_name}")
            return []
        # html_url already points at /pull/N for pull requests
        return [PushRecord(identifier_for(issue["html_url"]), updated_fingerprint(issue)) for issue in issues]

    def _collect_files(self, full_name: str, ref: str | None) -> list[PushRecord]:
        records: list[PushRecord] = []
        pending = [""]
        while pending:
            path = pending.pop(0)
            try:
                entries = self.client.get_directory(full_name, path, ref)
            except ItemNotFoundError:
                # Empty repository, or a directory removed during the walk
                logger.debug(f"  No content at {full_name}/{path}")
                continue
            for entry in sorted(entries, key=lambda e: e["path"]):
                if entry["type"] == "dir":
                    pending.append(entry["path"])
                elif entry["type"] == "file":
                    records.append(PushRecord(identifier_for(entry["html_url"]), content_fingerprint(entry)))
        return records
