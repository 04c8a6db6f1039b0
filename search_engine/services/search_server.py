"""
Browser search form backed by a shared inverted index.
"""

import threading
from datetime import datetime
from typing import List

from flask import Flask, Response, redirect, request, url_for
from markupsafe import Markup, escape

from search_engine.index.base import BaseInvertedIndex
from search_engine.index.models import QueryResult
from search_engine.text import text_parser
from search_engine.utils.logging import get_logger


PAGE_TEMPLATE = """<html>
<head><title>Search</title></head>
<body>
<h1>Results</h1>
{results}
<h1>Search</h1>
<form method="post" action="{action}">
<p>Query <input type="text" name="query" value="{query}" maxlength="100" size="60"></p>
<p><input type="submit" value="Search"></p>
</form>
<p>Updated at {updated}</p>
</body>
</html>
"""


def render_results(results: List[QueryResult]) -> Markup:
    """Ordered HTML list of result links, or a placeholder paragraph."""
    if not results:
        return Markup("<p>No search results.</p>")

    items = Markup("").join(
        Markup('<li><a href="{0}">{0}</a></li>\n').format(result.location)
        for result in results
    )
    return Markup("<ol>\n") + items + Markup("</ol>")


class SearchServer:
    """Serves a partial-search form over an index."""

    def __init__(self, index: BaseInvertedIndex,
                 host: str = '127.0.0.1', port: int = 8080):
        """
        Initialize search server.

        Args:
            index: Index to search; only read by the server
            host: Host to bind to
            port: Port to bind to
        """
        self.index = index
        self.host = host
        self.port = port
        self.logger = get_logger(__name__)

        # Create Flask app
        self.app = Flask(__name__)
        self._setup_routes()

        # Server thread
        self.server_thread = None
        self.running = False

    def search(self, query: str) -> List[QueryResult]:
        """Partial search for the stems of query; empty for a query with no words."""
        stems = text_parser.unique_stems(query)
        if not stems:
            return []
        return self.index.partial_search(stems)

    def _setup_routes(self):
        """Setup HTTP routes for the search page."""

        @self.app.route('/', methods=['GET'])
        def search_page():
            """Search form, plus results when a query parameter is given."""
            query = request.args.get('query', '')
            results = self.search(query)

            if query:
                self.logger.info(f"Query {query!r} matched {len(results)} location(s)")

            page = PAGE_TEMPLATE.format(
                results=render_results(results),
                action=escape(url_for('submit_query')),
                query=escape(query),
                updated=datetime.now().strftime('%I:%M %p on %A, %B %d %Y')
            )
            return Response(page, mimetype='text/html')

        @self.app.route('/', methods=['POST'])
        def submit_query():
            """Redirect a submitted query to the GET page."""
            query = request.form.get('query', '')
            return redirect(url_for('search_page', query=query))

    def start(self, block: bool = True):
        """
        Start the search server.

        Args:
            block: Serve on the calling thread until interrupted; otherwise
                serve from a daemon thread
        """
        if self.running:
            return

        self.running = True
        self.logger.info(f"Search server started on {self.host}:{self.port}")

        if block:
            self._run_server()
            return

        self.server_thread = threading.Thread(
            target=self._run_server,
            daemon=True
        )
        self.server_thread.start()

    def stop(self):
        """Stop waiting on the search server thread."""
        self.running = False
        if self.server_thread and self.server_thread.is_alive():
            self.server_thread.join(timeout=5)
        self.logger.info("Search server stopped")

    def _run_server(self):
        """Run the Flask server."""
        try:
            self.app.run(
                host=self.host,
                port=self.port,
                debug=False,
                use_reloader=False,
                threaded=True
            )
        except OSError as e:
            self.logger.error(f"Search server error: {str(e)}")
        finally:
            self.running = False


def create_app(index: BaseInvertedIndex) -> Flask:
    """Flask app serving the search page over index."""
    return SearchServer(index).app
