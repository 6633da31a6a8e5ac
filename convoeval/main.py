from convoeval.api.main import app

__all__ = ["app"]
