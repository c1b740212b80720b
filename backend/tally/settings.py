"""Tally configuration via environment variables."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class TallySettings(BaseSettings):
    model_config = {"env_prefix": "TALLY_"}

    data_dir: str = Field(default="~/.local/share/tally", min_length=1)
    state_file: str = Field(default="appstate.json", min_length=1)
    log_dir: str | None = None  # no log file unless set
    terminal_bell: bool = True  # ring the bell for score sounds

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()
