from shared.clients.ClientManager import ClientManager
from shared.clients.embed.EmbedClientInterface import EmbedClientInterface


class EmbedClientManager(ClientManager[EmbedClientInterface]):
    """Loads the embedding client named in EMBED_ENGINE (default: ollama)."""

    client_type = "embed"
    class_prefix = "EmbedClient"
    default_engine = "ollama"
