# api/index.py

from http.server import BaseHTTPRequestHandler

PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>GitHub Language Analyzer</title>
<style>
body { font: 15px/1.5 monospace; margin: 2em auto; max-width: 70ch; }
dt { font-weight: bold; margin-top: 1em; }
</style>
</head>
<body>
<h1>GitHub Language Analyzer</h1>
<p>Sums the language bytes GitHub reports for each of a user's public
repositories and ranks them by share.</p>
<dl>
<dt>GET /api/languages?username=NAME</dt>
<dd>JSON list of <code>{language, percent, bytes}</code>, largest share first.</dd>
<dt>forks=false</dt>
<dd>Leave forked repositories out of the totals.</dd>
</dl>
<p>Example: <a href="/api/languages?username=octocat">/api/languages?username=octocat</a></p>
<p>Without a GITHUB_TOKEN the upstream API allows 60 requests per hour.</p>
</body>
</html>
"""


class handler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = PAGE.encode()
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)
