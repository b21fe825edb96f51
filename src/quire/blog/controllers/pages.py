"""Static pages and the 404 page."""

from quire.http.request import Request
from quire.templating.returns import Template


class PagesController:
    __slots__ = ()

    def about(self) -> Template:
        return Template("pages/about.html")

    def not_found(self, request: Request) -> tuple[Template, int]:
        """Rendered for unmatched paths and for records that don't exist."""
        return Template("errors/404.html", path=request.path), 404
