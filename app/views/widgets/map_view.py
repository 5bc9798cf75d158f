"""Web view used for the map page."""

from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtWebEngineCore import QWebEngineScript
from PySide6.QtWebEngineWidgets import QWebEngineView


class MapView(QWebEngineView):
    """Browser widget with URI loading and document-ready script injection."""

    def load_uri(self, uri: str) -> None:
        self.load(QUrl(uri))

    def run_javascript(self, source: str) -> None:
        """Inject `source` into every page this view loads, once the DOM is ready."""
        script = QWebEngineScript()
        script.setName(f"injected-{self.page().scripts().count()}")
        script.setSourceCode(source)
        script.setInjectionPoint(QWebEngineScript.DocumentReady)
        script.setWorldId(QWebEngineScript.MainWorld)
        script.setRunsOnSubFrames(False)
        self.page().scripts().insert(script)
