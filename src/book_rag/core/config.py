"""Configuration management for the book RAG evaluation pipeline.

This module provides:
- ModelConfig: configuration for a chat-completion model
- RAGConfig: configuration for the RAG system under test
- EvaluationConfig: configuration for the evaluation runner
- DatasetConfig: configuration for benchmark generation
- AppConfig: main application configuration
- load_config: function to load configuration from YAML files
"""

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError
import yaml

from book_rag.core.exceptions import ConfigurationError


class ModelConfig(BaseModel):
    """Configuration for a chat-completion model.

    ----------
    model : str
        The model identifier or name.
    provider : str
        The provider of the model ('openai' or 'ollama').
    base_url : str | None
        Optional base URL for the model API endpoint.
    temperature : float
        Sampling temperature (default: 0.0).
    timeout_s : float
        Seconds to wait for one completion before treating it as failed.
    """

    model: str = "gpt-4o-mini"
    provider: str = "openai"
    base_url: str | None = None
    temperature: float = 0.0
    timeout_s: float = Field(default=30.0, gt=0)


class RAGConfig(BaseModel):
    """Configuration for the RAG system under test.

    ----------
    base_url : str
        Base URL of the book RAG server.
    timeout_s : float
        Seconds to wait for one answer before treating the query as failed.
    """

    base_url: str = "http://localhost:3000"
    timeout_s: float = Field(default=30.0, gt=0)


class EvaluationConfig(BaseModel):
    """Configuration for the evaluation runner.

    ----------
    judge : ModelConfig
        Model used as the automated judge.
    max_judge_attempts : int
        Attempts at the full four-dimension judgment per question (default: 3).
    """

    judge: ModelConfig = Field(default_factory=ModelConfig)
    max_judge_attempts: int = Field(default=3, ge=1)


class DatasetConfig(BaseModel):
    """Configuration for benchmark generation.

    ----------
    generator : ModelConfig
        Model used to synthesize and critique question/answer pairs.
    target_size : int
        Number of accepted pairs to aim for.
    version : str
        Version label written into the dataset.
    seed : int | None
        Optional shuffle seed; ``None`` draws a fresh one per run.
    """

    generator: ModelConfig = Field(default_factory=ModelConfig)
    target_size: int = 50
    version: str = "1.0"
    seed: int | None = None


class AppConfig(BaseModel):
    """Main application configuration.

    ----------
    rag : RAGConfig
        Configuration for the RAG system under test.
    evaluation : EvaluationConfig
        Configuration for evaluation.
    dataset : DatasetConfig
        Configuration for dataset generation.
    """

    rag: RAGConfig = Field(default_factory=RAGConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)


def load_config(path: Path | None) -> AppConfig:
    """Load application configuration from a YAML file.

    Parameters
    ----------
    path : Path | None
        Path to the YAML configuration file. ``None`` or a missing file yields
        the defaults.

    Returns:
    -------
    AppConfig
        Parsed application configuration object.
    """
    if path is None or not path.exists():
        return AppConfig()
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Malformed YAML in {path}: {exc}") from exc
    try:
        return AppConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}: {exc}") from exc
