"""plugforge - WordPress plugin scaffolding on a Laravel-style stack."""

__version__ = "0.3.0"
__logo__ = "🧩"
