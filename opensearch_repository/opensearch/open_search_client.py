from opensearchpy import OpenSearch, RequestsHttpConnection
from requests_aws4auth import AWS4Auth
import boto3

from .abstract_classes import ABCClient
from ..global_config import GlobalConfig, global_config


class OpenSearchClient(ABCClient):
    """Build and cache an OpenSearch client from the repository configuration.

    The underlying ``OpenSearch`` instance owns the connection pool and is
    safe to share between repositories and threads.
    """

    def __init__(self, config: GlobalConfig | None = None):
        """Initialize the OpenSearchClient.

        Args:
            config (GlobalConfig, optional): Connection settings. Defaults to
                the module-level ``global_config``.
        """
        self.config = config or global_config
        self._client: OpenSearch | None = None

    def _http_auth(self):
        """Return the ``http_auth`` value for the configured auth mode."""
        config = self.config
        if config.opensearch_auth == "basic":
            return (config.opensearch_username, config.opensearch_password)

        if config.opensearch_auth == "aws":
            session = boto3.Session(region_name=config.aws_region)
            credentials = session.get_credentials()
            region = config.aws_region or session.region_name
            service = "es"

            return AWS4Auth(
                credentials.access_key,
                credentials.secret_key,
                region,
                service,
                session_token=credentials.token,
            )

        return None

    def get_client(self) -> OpenSearch:
        """Get the OpenSearch client instance.

        Returns:
            OpenSearch: The OpenSearch client instance.
        """
        if self._client is None:
            kwargs = {}
            http_auth = self._http_auth()
            if http_auth is not None:
                kwargs["http_auth"] = http_auth
            # Note: AWS IAM signing goes through requests, not urllib3
            if self.config.opensearch_auth == "aws":
                kwargs["connection_class"] = RequestsHttpConnection

            self._client = OpenSearch(
                hosts=[
                    {
                        "host": self.config.opensearch_host,
                        "port": self.config.opensearch_port,
                    }
                ],
                use_ssl=self.config.opensearch_use_ssl,
                verify_certs=self.config.opensearch_verify_certs,
                timeout=self.config.request_timeout,
                **kwargs,
            )

        return self._client
