"""Unified settings for httpfacade."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when the file is not shipped."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from package metadata or fallback to the tags of the source checkout."""
    try:
        import importlib.metadata

        return importlib.metadata.version("httpfacade")
    except Exception:
        try:
            import git

            # No parent search: an installed copy must not pick up the host project's tags.
            repo = git.Repo(base_dir)
            latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
            return str(latest_tag) if latest_tag else "0.0.0"
        except Exception:
            return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the httpfacade client, read from ``HTTPFACADE_*`` variables."""

    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "NOTSET"] = "INFO"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "httpfacade")
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Transport
    FOLLOW_REDIRECTS: bool = True
    MAX_REDIRECTS: int = 20

    @property
    def user_agent(self) -> str:
        return f"{self.API_NAME}/{self.API_VERSION}"

    model_config = SettingsConfigDict(
        env_prefix="HTTPFACADE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()  # type: ignore
