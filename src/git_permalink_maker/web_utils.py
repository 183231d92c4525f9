import logging
import sys
import webbrowser
from typing import Callable, Dict

import pyperclip

logger = logging.getLogger(__name__)


def copy_to_clipboard(url: str) -> None:
    """Copies the URL to the system clipboard and shows it."""
    try:
        pyperclip.copy(url)
    except pyperclip.PyperclipException as e:
        logger.warning(f"⚠️ Could not copy to clipboard: {e}")
        print(url)
        return
    logger.info(f"🔗 {url} (copied to clipboard)")


def open_in_browser(url: str) -> None:
    logger.info(f"🌐 Opening {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error as e:
        logger.warning(f"⚠️ Could not open URL '{url}' in browser: {e}. Please open manually.")
        print(url)


def print_url(url: str) -> None:
    print(url, file=sys.stdout)


ACTIONS: Dict[str, Callable[[str], None]] = {
    "copy": copy_to_clipboard,
    "open": open_in_browser,
    "print": print_url,
}
