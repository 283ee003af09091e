"""Session factory for the command interpreter and GUI front ends."""

from __future__ import annotations

import logging

import numpy as np
from dotenv import load_dotenv

from pixelstack.config import settings
from pixelstack.workspace import Workspace


def configure_logging() -> None:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, settings.pixelstack_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def create_workspace(seed: int | None = None) -> Workspace:
    """A fresh Workspace; ``seed`` overrides ``settings.mosaic_seed``."""
    configure_logging()
    rng = np.random.default_rng(settings.mosaic_seed if seed is None else seed)
    return Workspace(rng=rng)
