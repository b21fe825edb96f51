"""``python -m quire.blog``: same as ``quire-blog``."""

from quire.blog.cli import main

main()
