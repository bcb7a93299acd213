# index.py

from http.server import BaseHTTPRequestHandler
from urllib.parse import urlparse


class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        # Keep the query so /?username=octocat lands on the JSON endpoint
        query = urlparse(self.path).query
        location = f"/api/languages?{query}" if "username=" in query else "/api/"
        self.send_response(302)
        self.send_header("Location", location)
        self.send_header("Content-Length", "0")
        self.end_headers()
