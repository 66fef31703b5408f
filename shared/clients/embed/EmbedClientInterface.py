from abc import abstractmethod

from shared.clients.ClientInterface import ClientInterface
from shared.errors import ServiceUnavailableError
from shared.helper.HelperConfig import HelperConfig


class EmbedClientInterface(ClientInterface):
    """Turns text into embedding vectors, one request per text."""

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self.embed_model = helper_config.get_string_val("EMBED_MODEL", default="nomic-embed-text:latest")

    ##########################################
    ################ GETTER ##################
    ##########################################

    def _get_client_type(self) -> str:
        return "embed"

    ################ ENDPOINTS ##################
    @abstractmethod
    def get_endpoint_embedding(self) -> str:
        pass

    @abstractmethod
    def get_endpoint_model_details(self) -> str:
        pass

    ################ PAYLOAD BUILDER ##################
    @abstractmethod
    def get_embed_payload(self, text: str) -> dict:
        """
        Returns the request body that embeds a single text with self.embed_model.
        """
        pass

    @abstractmethod
    def get_model_details_payload(self) -> dict:
        pass

    ################ RESPONSE PARSER ##################
    @abstractmethod
    def extract_vector_size_from_model_info(self, model_info: dict) -> int:
        """
        Returns the output dimension of the model.

        Raises:
            ValueError: If the model details do not state it.
        """
        pass

    @abstractmethod
    def extract_embedding_from_response(self, response_data: dict) -> list[float]:
        """
        Returns the vector of an embedding response.

        Raises:
            ValueError: If the body carries no usable vector.
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_fetch_embedding_vector_size(self) -> int:
        """Ask the backend how many dimensions the configured model produces.

        Raises:
            ServiceUnavailableError: If the backend cannot be reached.
            ValueError: If the answer does not state the dimension.
        """
        response = await self.do_request(
            "POST",
            self.get_endpoint_model_details(),
            json=self.get_model_details_payload(),
            raise_on_error=True,
        )
        return self.extract_vector_size_from_model_info(response.json())

    async def do_embed_text(self, text: str, expected_size: int | None = None) -> list[float]:
        """Embed one text.

        Args:
            text (str): The text to embed.
            expected_size (int | None): Required vector dimension, if any.

        Returns:
            list[float]: The embedding vector.

        Raises:
            ServiceUnavailableError: If the request fails, the body is unusable
                or the vector has the wrong dimension.
        """
        response = await self.do_request("POST", self.get_endpoint_embedding(), json=self.get_embed_payload(text), raise_on_error=True)
        try:
            # json decoding errors are ValueErrors too
            vector = self.extract_embedding_from_response(response.json())
        except ValueError as exc:
            self.logging.error("Unusable embedding response from %s: %s", self.get_service_name(), exc)
            raise ServiceUnavailableError(str(exc), service=self.get_service_name()) from exc

        if expected_size is not None and len(vector) != expected_size:
            self.logging.error(
                "Embedding model %r returned %d dimensions, expected %d.",
                self.embed_model, len(vector), expected_size,
            )
            raise ServiceUnavailableError(
                f"Embedding has {len(vector)} dimensions, expected {expected_size}.",
                service=self.get_service_name(),
            )
        return vector

    async def do_embed(self, texts: list[str], expected_size: int | None = None) -> list[list[float]]:
        """Embed several texts sequentially, in input order. The first failure aborts the call."""
        return [await self.do_embed_text(text, expected_size=expected_size) for text in texts]
