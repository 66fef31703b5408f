from typing import Generic, TypeVar

from shared.clients.ClientInterface import ClientInterface
from shared.helper.HelperConfig import HelperConfig

C = TypeVar("C", bound=ClientInterface)


class ClientManager(Generic[C]):
    """
    Instantiates the client of one client type for the engine named in
    "<TYPE>_ENGINE", e.g. EMBED_ENGINE=ollama loads
    shared.clients.embed.ollama.EmbedClientOllama.
    """

    client_type: str = ""
    class_prefix: str = ""
    default_engine: str = ""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.client: C = self._initialize_client()

    def _get_engine_from_env(self) -> str:
        engine = self.helper_config.get_string_val(f"{self.client_type.upper()}_ENGINE", default=self.default_engine)
        return engine.strip().lower().capitalize()

    def _initialize_client(self) -> C:
        """
        Raises:
            ValueError: If the configured engine has no client implementation.
        """
        engine = self._get_engine_from_env()
        class_name = f"{self.class_prefix}{engine}"
        try:
            module = __import__(f"shared.clients.{self.client_type}.{engine.lower()}.{class_name}", fromlist=[class_name])
            client_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError(f"Unsupported {self.client_type} engine '{engine}': {e}")

        self.logging.debug("Instantiated %s client for engine %s", self.client_type, engine)
        return client_class(helper_config=self.helper_config)

    def get_client(self) -> C:
        return self.client
