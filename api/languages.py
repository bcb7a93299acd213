# api/languages.py

from github_languages.server import LanguagesHandler


class handler(LanguagesHandler):
    pass
