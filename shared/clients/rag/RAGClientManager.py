from shared.clients.ClientManager import ClientManager
from shared.clients.rag.RAGClientInterface import RAGClientInterface


class RAGClientManager(ClientManager[RAGClientInterface]):
    """Loads the vector store client named in RAG_ENGINE (default: qdrant)."""

    client_type = "rag"
    class_prefix = "RAGClient"
    default_engine = "qdrant"
