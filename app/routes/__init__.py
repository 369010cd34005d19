from .main import main_routes_bp

__all__ = ["main_routes_bp"]
