from painel.main import app

__all__ = ["app"]
