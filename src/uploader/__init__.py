"""Remote media uploader.

Downloads a file referenced by URL, checks it against the media allow-list and
registers it as an attachment in the media catalog.
"""

from .main import create_app

__all__ = ["create_app"]
