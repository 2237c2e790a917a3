"""Application settings loaded from environment variables via pydantic-settings.

Values are read from (highest priority first):

  1. Environment variables, e.g. ``TRANSFORMATION_BUCKET=my-bucket``
  2. A ``.env`` file in the working directory
  3. The defaults below

Field ``transformation_bucket`` maps to env var ``TRANSFORMATION_BUCKET``
(pydantic-settings upper-cases and matches).  ``config/config.yaml`` can
supply a layer underneath the environment; see :mod:`codechunk.config.loader`.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """codechunk settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Intermediate storage ===
    # Bucket that receives the persisted chunk batches.  Supplied out of band
    # by the hosting environment, never by the transformation event.
    transformation_bucket: str = ""
    output_prefix: str = "transformations"
    storage_backend: Literal["s3", "local"] = "s3"
    local_storage_root: str = "./data/objects"
    aws_region: str = ""

    # === Chunking ===
    max_chunk_size: int = Field(default=1000, ge=1)

    # === Job execution ===
    # 1 keeps files strictly sequential.
    max_concurrent_files: int = Field(default=1, ge=1)
    # False: an InputError on any file aborts the whole job.
    isolate_file_failures: bool = False
    storage_max_attempts: int = Field(default=3, ge=1)
    storage_retry_backoff_seconds: float = Field(default=0.5, ge=0.0)
    job_deadline_seconds: float | None = Field(default=None, gt=0.0)
    deadline_safety_margin_seconds: float = Field(default=2.0, ge=0.0)

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
