# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GraderConfig(BaseSettings):
    """
    Configuration for the execution and grading service.

    Read once at startup. The listen port and CORS origin also accept the
    bare ``EXECUTION_PORT`` and ``CORS_ORIGIN`` variables used by existing
    deployments.
    """

    host: str = "0.0.0.0"
    port: int = Field(
        default=3847,
        validation_alias=AliasChoices("EXECUTION_PORT", "COREASON_GRADER_PORT"),
    )
    # Restrict to the app origin in production.
    cors_origin: str = Field(
        default="*",
        validation_alias=AliasChoices("CORS_ORIGIN", "COREASON_GRADER_CORS_ORIGIN"),
    )

    cargo_binary: str = "cargo"
    build_timeout_ms: int = Field(default=15_000, gt=0)
    run_timeout_ms: int = Field(default=10_000, gt=0)
    orphan_max_age: float = 3600.0  # seconds

    model_config = SettingsConfigDict(
        env_prefix="COREASON_GRADER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
