from secureauth.api.routes import auth, health

__all__ = ["auth", "health"]
