from shared.clients.embed.EmbedClientInterface import EmbedClientInterface
from shared.models.config import EnvConfig


class EmbedClientOllama(EmbedClientInterface):
    """Ollama embeddings via the single-prompt /api/embeddings endpoint."""

    def _get_engine_name(self) -> str:
        return "Ollama"

    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default="http://localhost:11434"),
            EnvConfig(env_key="API_KEY", val_type="string", default=""),
        ]

    def _get_auth_header(self) -> dict:
        api_key = self.get_setting("API_KEY")
        return {"Authorization": f"Bearer {api_key}"} if api_key else {}

    ################ ENDPOINTS ##################
    def _get_endpoint_healthcheck(self) -> str:
        # ollama answers "Ollama is running" on its root
        return ""

    def get_endpoint_embedding(self) -> str:
        return "/api/embeddings"

    def get_endpoint_model_details(self) -> str:
        return "/api/show"

    ################ PAYLOAD BUILDER ##################
    def get_embed_payload(self, text: str) -> dict:
        return {"model": self.embed_model, "prompt": text}

    def get_model_details_payload(self) -> dict:
        return {"name": self.embed_model}

    ################ RESPONSE PARSER ##################
    def extract_vector_size_from_model_info(self, model_info: dict) -> int:
        # e.g. {"model_info": {"nomic-bert.embedding_length": 768, ...}}
        for key, value in (model_info.get("model_info") or {}).items():
            if key.endswith(".embedding_length"):
                return int(value)
        raise ValueError(f"Model details of {self.embed_model!r} do not state an embedding length.")

    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        embedding = response_data.get("embedding") if isinstance(response_data, dict) else None
        if not isinstance(embedding, list) or not embedding:
            found = sorted(response_data) if isinstance(response_data, dict) else type(response_data).__name__
            raise ValueError(f"Ollama response has no embedding (got {found}).")
        try:
            return [float(value) for value in embedding]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Ollama embedding contains non-numeric values: {exc}")
