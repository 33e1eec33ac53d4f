"""Creates the enumerator and builder pair for a configured source."""

from dataclasses import dataclass

from common.constants import SOURCES
from common.env import env
from common.logger import get_logger
from sync.builder import DocumentBuilder
from sync.enumerator import SourceEnumerator
from sync.errors import ConfigurationError, TransientError

logger = get_logger(__name__)


@dataclass
class Connector:
    name: str
    enumerator: SourceEnumerator
    builder: DocumentBuilder


def create_connector(source: str, validate: bool = True) -> Connector:
    """Create a connector from environment configuration.

    Args:
        source: Source name, one of SOURCES
        validate: Check credentials against the source before returning

    Raises:
        ConfigurationError: If the source is unknown or misconfigured
        AuthenticationError: If the source rejects the credentials
    """
    if source == "github":
        return _github_connector(validate)
    if source == "sample":
        return _sample_connector()
    raise ConfigurationError(f"Unknown source {source!r}. Must be one of: {', '.join(SOURCES)}")


def _github_connector(validate: bool) -> Connector:
    from connectors.github import GitHubClient, GitHubDocumentBuilder, GitHubEnumerator

    names = env.github_repos()
    user = env.github_user()
    token = env.github_token()
    if not names:
        raise ConfigurationError("GITHUB_REPOS must list at least one organization or owner/repo")
    if not user or not token:
        raise ConfigurationError("GITHUB_USER and GITHUB_TOKEN must be set")

    client = GitHubClient(
        user=user,
        token=token,
        api_url=env.github_api_url(),
        requests_per_minute=env.github_requests_per_minute(),
    )
    if validate:
        try:
            me = client.get_myself()
        except TransientError as e:
            raise ConfigurationError(f"Unable to reach GitHub at {client.api_url}: {e}") from e
        logger.info(f"Authenticated to GitHub as {me.get('login', user)}")

    return Connector(
        name="github",
        enumerator=GitHubEnumerator(client, names),
        builder=GitHubDocumentBuilder(client),
    )


def _sample_connector() -> Connector:
    from connectors.sample import SampleCorpus, SampleDocumentBuilder, SampleEnumerator

    mode = env.sample_traversal().lower()
    if mode not in ("list", "full"):
        raise ConfigurationError(f"SAMPLE_TRAVERSAL must be 'list' or 'full', got {mode!r}")

    count = env.sample_document_count()
    if count < 1:
        raise ConfigurationError(f"SAMPLE_DOCUMENT_COUNT must be at least 1, got {count}")

    corpus = SampleCorpus(document_count=count)
    return Connector(
        name="sample",
        enumerator=SampleEnumerator(corpus, push_fingerprints=mode == "list"),
        builder=SampleDocumentBuilder(corpus),
    )
