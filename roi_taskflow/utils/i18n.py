"""
Message catalog setup.

Modules translate with ``from gettext import gettext as _``; importing this
module binds that global lookup to the roi_taskflow catalog.
"""

import gettext
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TEXT_DOMAIN = "roi_taskflow"
LOCALE_DIR = Path(__file__).parent.parent / "i18n"


def bind_catalog(locale_dir: Path = LOCALE_DIR):
    gettext.bindtextdomain(TEXT_DOMAIN, localedir=str(locale_dir))
    gettext.textdomain(TEXT_DOMAIN)
    logger.debug(f'Loading locale data from "{locale_dir}"')


def set_language(language: Optional[str]):
    """
    Select the catalog language for the following lookups.

    gettext reads ``LANGUAGE`` on every lookup, so this takes effect for
    messages built after the call. Missing catalogs fall back to English.
    """
    if not language:
        return
    os.environ["LANGUAGE"] = language
    found = gettext.find(TEXT_DOMAIN, localedir=str(LOCALE_DIR), languages=[language])
    if found is None:
        logger.debug(f"No {language} catalog for {TEXT_DOMAIN}, using untranslated messages")


bind_catalog()
