from typing import Literal

from pydantic import BaseModel, Field

from shared.helper.HelperConfig import HelperConfig


class EnvConfig(BaseModel):
    """One environment setting of a backend client.

    env_key is given without the "<TYPE>_<ENGINE>_" prefix. A default of None
    makes the setting mandatory.
    """

    env_key: str
    val_type: Literal["string", "number"] = "string"
    default: str | int | float | None = None


class EngineConfig(BaseModel):
    """
    Tunables of the indexing and retrieval engine.

    Built once at start-up and handed to the services explicitly, so the engine
    itself never reads the environment.

    Attributes:
        vector_size (int): Dimension of the embedding vectors. Must match the collection.
        distance (str): Distance metric of the collection.
        chunk_size (int): Maximum characters per chunk (single oversized paragraphs excepted).
        chunk_overlap (int): Characters carried over from a flushed chunk into the next one.
        score_threshold (float): Similarity floor for semantic hits.
        search_concurrency (int): Max query variants processed in parallel.
    """

    vector_size: int = Field(default=768, gt=0)
    distance: str = "Cosine"
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=100, ge=0)
    score_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    search_concurrency: int = Field(default=4, gt=0)

    @classmethod
    def from_helper_config(cls, helper_config: HelperConfig) -> "EngineConfig":
        """Read the engine tunables from ENGINE_* environment variables.

        Args:
            helper_config (HelperConfig): The configuration helper.

        Returns:
            EngineConfig: The resolved configuration, falling back to defaults.
        """
        defaults = cls()
        return cls(
            vector_size=int(helper_config.get_number_val("ENGINE_VECTOR_SIZE", default=defaults.vector_size)),
            distance=helper_config.get_string_val("ENGINE_DISTANCE", default=defaults.distance),
            chunk_size=int(helper_config.get_number_val("ENGINE_CHUNK_SIZE", default=defaults.chunk_size)),
            chunk_overlap=int(helper_config.get_number_val("ENGINE_CHUNK_OVERLAP", default=defaults.chunk_overlap)),
            score_threshold=float(helper_config.get_number_val("ENGINE_SCORE_THRESHOLD", default=defaults.score_threshold)),
            search_concurrency=int(helper_config.get_number_val("ENGINE_SEARCH_CONCURRENCY", default=defaults.search_concurrency)),
        )
