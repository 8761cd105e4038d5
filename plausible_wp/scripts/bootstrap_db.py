"""Create the options and order meta tables."""

from __future__ import annotations

import logging

from plausible_wp.db.base import Base
from plausible_wp.db.models import OptionRow, OrderMetaRow  # noqa: F401 - registers tables
from plausible_wp.db.session import engine

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    logger.info("Created tables on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    main()
